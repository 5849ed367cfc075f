"""
Hash a secret read from standard input, or verify it against an encoded hash.

Encoder parameters come from ENCODER_* environment variables (or a .env file).

Usage:
  secret-encoder [-a ALGORITHM] [-D]
  secret-encoder verify ENCODED [-a ALGORITHM] [-D]

Options:
  -a ALGORITHM      : bcrypt, argon2id, pbkdf2, scrypt, hkdf or hmac.
                      Falls back to $ENCODER_ALGORITHM, then argon2id.
  -D                : Enable debug logging.
"""
import logging
import sys
from typing import List, Optional

from argon2.exceptions import HashingError
import docopt

from .errors import EncoderError
from .factory import from_env

EXIT_MISMATCH = 1
EXIT_ERROR = 2


def main(argv: Optional[List[str]] = None) -> int:
    args = docopt.docopt(__doc__, argv=argv)
    logging.basicConfig(level=logging.DEBUG if args["-D"] else logging.WARNING,
                        format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    try:
        encoder = from_env(args["-a"])
    except EncoderError as exc:
        logging.error("%s: %s", type(exc).__name__, exc)
        return EXIT_ERROR
    if encoder is None:
        logging.error("Unknown algorithm: %s", args["-a"])
        return EXIT_ERROR

    secret = sys.stdin.read().rstrip("\r\n")
    if not secret:
        logging.error("No secret given on standard input")
        return EXIT_ERROR

    try:
        if args["verify"]:
            matched = encoder.verify(args["ENCODED"], secret)
            print("true" if matched else "false")
            return 0 if matched else EXIT_MISMATCH
        print(encoder.encode(secret))
    except (EncoderError, HashingError, ValueError) as exc:  # ValueError: bcrypt, cryptography
        logging.error("%s: %s", type(exc).__name__, exc)
        return EXIT_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
