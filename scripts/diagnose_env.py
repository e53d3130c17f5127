#!/usr/bin/env python
"""Environment & connectivity diagnostics for the SmartFile client.

Usage:
  python scripts/diagnose_env.py [--ping]

Without flags runs credential presence/validity checks. Use --ping to call the
ping and whoami endpoints with the configured credentials.
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from smartfile.basic_client import BasicClient, is_valid_token
from smartfile.config import KEY_ENV, PASSWORD_ENV, THROTTLE_WAIT_ENV, URL_ENV, VERSION_ENV, env, load_env_file
from smartfile.exceptions import APIError

logger = logging.getLogger('diagnose_env')

MANDATORY = [KEY_ENV, PASSWORD_ENV]
OPTIONAL = [URL_ENV, VERSION_ENV, THROTTLE_WAIT_ENV]


def mask(val: str | None) -> str | None:
    if not val:
        return val
    if len(val) <= 6:
        return '*' * len(val)
    return val[:4] + '...' + val[-4:]


def check_presence() -> Dict[str, str]:
    report: Dict[str, str] = {}
    for k in MANDATORY:
        v = env(k)
        if v is None:
            report[k] = 'MISSING'
        elif not is_valid_token(v):
            report[k] = 'INVALID'
        else:
            report[k] = 'OK'
    return report


def print_report() -> bool:
    presence = check_presence()
    print('\n[CREDENTIALS]')
    widest = max(len(k) for k in MANDATORY + OPTIONAL)
    for k, status in presence.items():
        raw = os.getenv(k)
        print(f"  {k.ljust(widest)} : {status:<8} {mask(raw) if status == 'OK' else ''}")
    print('\n[OPTIONAL]')
    for k in OPTIONAL:
        raw = os.getenv(k)
        if raw:
            print(f"  {k.ljust(widest)} = {raw}")
    print()
    return all(status == 'OK' for status in presence.values())


def ping() -> bool:
    try:
        with BasicClient.from_env(timeout=20) as client:
            for endpoint in ('ping', 'whoami'):
                resp = client.get(endpoint)
                print(f"[{endpoint}] Status: {resp.status_code}")
                print(f"[{endpoint}] Body  : {resp.text[:300].replace(chr(10), ' ')}")
    except APIError as e:
        print(f"[ping] ERROR: {e}")
        if getattr(e, 'status_code', None) in (401, 403):
            print("HINT 401/403: key/password rejected or not allowed on this site.")
        return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description='Check SmartFile credentials and connectivity')
    p.add_argument('--ping', action='store_true', help='Call ping and whoami endpoints')
    load_env_file(PROJECT_ROOT / '.env')
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
    ok = print_report()
    if args.ping:
        if not ok:
            logger.warning('Skipping connectivity test, credentials are not usable')
            return 1
        ok = ping()
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
