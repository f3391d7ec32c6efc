import argparse

from contactvault.ui.shell import cmd_shell
from contactvault.utils.dataModels import DEFAULT_ROOT_NAME, DEFAULT_T_COST, DEFAULT_M_COST_KiB, DEFAULT_PARALLELISM
from contactvault.utils.maintain import cmd_export, cmd_init


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cvault", description="Encrypted contact vault with an interactive shell and vCard export")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create an empty vault")
    p_init.add_argument("store", help="Path to the vault file")
    p_init.add_argument("--passphrase", help="Master passphrase (default: $CVAULT_PASSPHRASE or prompt)")
    p_init.add_argument("--name", default=DEFAULT_ROOT_NAME, help="Name of the root group")
    p_init.add_argument("-t", type=int, default=DEFAULT_T_COST, help="Argon2 time cost (iterations)")
    p_init.add_argument("-m", type=int, default=DEFAULT_M_COST_KiB, help="Argon2 memory (KiB)")
    p_init.add_argument("-p", type=int, default=DEFAULT_PARALLELISM, help="Argon2 parallelism")
    p_init.add_argument("--force", action="store_true", help="Overwrite the vault file if present")
    p_init.set_defaults(func=cmd_init)

    p_shell = sub.add_parser("shell", help="Unlock a vault and open the interactive shell")
    p_shell.add_argument("store", help="Path to the vault file")
    p_shell.add_argument("--passphrase", help="Master passphrase (default: $CVAULT_PASSPHRASE or prompt)")
    p_shell.add_argument("--editor", help="Notes editor command, {title} is replaced (default: $CVAULT_EDITOR or the built-in form)")
    p_shell.set_defaults(func=cmd_shell)

    p_exp = sub.add_parser("export", help="Convert a vault to another format")
    p_exp.add_argument("store", help="Path to the vault file")
    p_exp.add_argument("out", help="Output path; .vcf/.vcard selects vCard")
    p_exp.add_argument("--format", choices=["vcard"], help="Output format (default: from the extension)")
    p_exp.add_argument("--passphrase", help="Master passphrase (default: $CVAULT_PASSPHRASE or prompt)")
    p_exp.set_defaults(func=cmd_export)

    return p
