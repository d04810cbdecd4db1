#!/usr/bin/env python3
"""
Admin access maintenance
Grant, revoke or check dashboard access for an email.

Usage:
    python scripts/grant-admin.py grant staff@example.com
    python scripts/grant-admin.py revoke staff@example.com
    python scripts/grant-admin.py check staff@example.com
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.services.admin_service import grant_admin, is_admin, revoke_admin  # noqa: E402
from src.services.document_store import get_document_store  # noqa: E402
from src.utils.exceptions import TransientIOError  # noqa: E402


def main(argv=None):
    parser = argparse.ArgumentParser(description="Manage admin access to the registration dashboard")
    parser.add_argument("action", choices=["grant", "revoke", "check"])
    parser.add_argument("email")
    args = parser.parse_args(argv)

    store = get_document_store()
    print(f"🔍 Database: {store.file_path}")

    try:
        if args.action == "grant":
            grant_admin(args.email, store)
            print(f"✅ {args.email} can now access the dashboard")
        elif args.action == "revoke":
            if revoke_admin(args.email, store):
                print(f"✅ {args.email} no longer has dashboard access")
            else:
                print(f"⚠️  {args.email} was not an admin")
        else:
            status = "is" if is_admin(args.email, store) else "is not"
            print(f"ℹ️  {args.email} {status} an admin")
    except TransientIOError as e:
        print(f"❌ Database unavailable: {e.cause or e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
