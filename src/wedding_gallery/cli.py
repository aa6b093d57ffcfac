"""Command-line helper for generating section passphrase hashes."""

import argparse

from wedding_gallery.services.passphrases import DEFAULT_ROUNDS, hash_passphrase


def main(argv: list[str] | None = None) -> int:
    """Print a bcrypt hash for a passphrase and an example config entry."""
    parser = argparse.ArgumentParser(
        prog="wedding-gallery-hash",
        description="Generate a bcrypt hash for a gallery section passphrase.",
    )
    parser.add_argument("passphrase")
    parser.add_argument("--section", default="ceremony")
    parser.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
    args = parser.parse_args(argv)

    hashed = hash_passphrase(args.passphrase, rounds=args.rounds)
    print(f"Hash: {hashed}")
    print("Add this hash to GALLERY_SECTIONS, for example:")
    print(f"GALLERY_SECTIONS={args.section}:{hashed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
