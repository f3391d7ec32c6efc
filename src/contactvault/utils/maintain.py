import argparse
import getpass
import logging
import os
import sys

from pathlib import Path
from typing import Tuple

from contactvault.crypto.hash import KdfParams
from contactvault.storage.vault import VaultStore
from contactvault.utils.dataModels import Database
from contactvault.utils.errors import OpenError, SaveError
from contactvault.utils.vcard import write_vcard_file

logger = logging.getLogger(__name__)

PASSPHRASE_ENV = "CVAULT_PASSPHRASE"
VCARD_EXTENSIONS = (".vcf", ".vcard")


def resolve_passphrase(args: argparse.Namespace, confirm: bool = False) -> str:
    if args.passphrase:
        return args.passphrase
    env = os.environ.get(PASSPHRASE_ENV)
    if env:
        return env
    pw = getpass.getpass("Master passphrase: ")
    if confirm and getpass.getpass("Confirm passphrase: ") != pw:
        print("[!] Passphrases do not match")
        sys.exit(1)
    return pw


def open_or_exit(args: argparse.Namespace) -> Tuple[VaultStore, Database]:
    store = VaultStore(Path(args.store), resolve_passphrase(args))
    try:
        database = store.open()
    except OpenError as e:
        logger.debug("open of %s failed", store.path, exc_info=True)
        print(f"[!] Unlock failed: {e}")
        sys.exit(1)
    return store, database


def cmd_init(args: argparse.Namespace) -> None:
    path = Path(args.store)
    store = VaultStore(path, resolve_passphrase(args, confirm=True))
    try:
        store.create(Database.empty(args.name), KdfParams.fresh(args.t, args.m, args.p), force=args.force)
    except SaveError as e:
        print(f"[!] {e}")
        sys.exit(1)
    print(f"[+] Initialized contact vault at {path}")


def detect_format(out: Path, fmt: str | None) -> str | None:
    if fmt:
        return fmt
    if out.suffix.lower() in VCARD_EXTENSIONS:
        return "vcard"
    return None


def cmd_export(args: argparse.Namespace) -> None:
    out = Path(args.out)
    if detect_format(out, args.format) != "vcard":
        print("[!] Could not detect file format based on path extension.")
        sys.exit(1)
    _, database = open_or_exit(args)
    try:
        count = write_vcard_file(database.root, out)
    except OSError as e:
        print(f"[!] Cannot write {out}: {e.strerror or e}")
        sys.exit(1)
    print(f"[+] Exported {count} contact(s) -> {out}")
