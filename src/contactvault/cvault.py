#!/usr/bin/env python3
"""
Contact Vault: an encrypted, hierarchical contact store with an interactive shell.

Vault file (big-endian header, then ciphertext):
    magic     : 4 bytes   -> b"CVS1"
    version   : 1 byte    -> 0x01
    t_cost    : u32
    m_cost    : u32  (KiB)
    parallel  : u32
    salt      : 16 bytes
    nonce     : 12 bytes
    ciphertext: remaining bytes (AES-256-GCM over the JSON group/entry tree,
                header bound as associated data)

Commands:
  init <store>             Create an empty vault with a root group
  shell <store>            Unlock and browse/edit contacts interactively
  export <store> <out>     Write every exportable contact as vCard 4.0

Shell commands:
  ls [--tag T]             List entries by title
  show <id>                Show an entry
  search <term>            Search title, nickname, phone number
  add <name>               Add a contact
  edit-field <id> <f> <v>  Set any field
  edit <id> [--phone ...]  Set well-known fields and tags
  edit-notes <id>          Edit notes in the external editor
  export-vcard <path>      Write vCard file
  help | ?                 Command summary
  exit                     Leave

Security choices:
  - AEAD: AES-256-GCM via cryptography.hazmat
  - Argon2id via argon2-cffi low-level API
  - Key = Argon2id(SHA3-512(passphrase)) -> 32 bytes
"""
from __future__ import annotations

import logging

from contactvault.ui.cli import build_parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
