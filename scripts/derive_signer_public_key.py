#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from dotenv import load_dotenv

from galaswap_arb.trading.signing import public_key_from_private, sign_payload, verify_signature


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print the base64 secp256k1 public key for PRIVATE_KEY (value for SIGNER_PUBLIC_KEY).",
    )
    parser.add_argument("--private-key", default=os.getenv("PRIVATE_KEY", ""))
    parser.add_argument(
        "--uncompressed",
        action="store_true",
        help="Emit the 65-byte uncompressed point instead of the 33-byte compressed form.",
    )
    parser.add_argument(
        "--self-test",
        action="store_true",
        help="Sign a sample payload and verify it against the derived key.",
    )
    return parser.parse_args()


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    load_dotenv(repo_root / ".env")

    args = parse_args()
    if not args.private_key:
        raise ValueError("PRIVATE_KEY is required (set env or --private-key).")

    public_key = public_key_from_private(args.private_key, compressed=not args.uncompressed)
    print(public_key)

    if args.self_test:
        sample = {"uniqueKey": "galaconnect-operation-self-test", "signerPublicKey": public_key}
        signature = sign_payload(sample, args.private_key)
        verified = verify_signature(sample, signature, public_key)
        print(json.dumps({"signature": signature, "verified": verified}, ensure_ascii=False))


if __name__ == "__main__":
    main()
