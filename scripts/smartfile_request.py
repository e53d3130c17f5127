#!/usr/bin/env python
"""Issue a single SmartFile API call from the command line.

Examples:
  python scripts/smartfile_request.py get ping
  python scripts/smartfile_request.py get path/info / --verbose
  python scripts/smartfile_request.py put path/oper/mkdir --data path=/reports --out data/mkdir.json
  python scripts/smartfile_request.py delete link 42 --no-throttle-wait

Credentials come from SMARTFILE_API_KEY / SMARTFILE_API_PASSWORD (a local .env is honoured)
unless --key / --password are given.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from smartfile.base_client import API_URL, API_VER
from smartfile.basic_client import BasicClient
from smartfile.config import URL_ENV, VERSION_ENV, env, load_env_file
from smartfile.exceptions import APIError, ResponseError

logger = logging.getLogger('smartfile_request')

METHODS = ['get', 'put', 'post', 'delete']


def parse_data(pairs: Optional[List[str]]) -> Optional[Dict[str, str]]:
    if not pairs:
        return None
    data: Dict[str, str] = {}
    for pair in pairs:
        if '=' not in pair:
            raise SystemExit(f'--data expects key=value, got: {pair}')
        k, v = pair.split('=', 1)
        data[k.strip()] = v
    return data


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description='Call the SmartFile API')
    p.add_argument('method', choices=METHODS, type=str.lower)
    p.add_argument('endpoint')
    p.add_argument('id', nargs='?', help='Optional resource identifier')
    p.add_argument('--data', action='append', metavar='KEY=VALUE',
                   help='Query parameter (get/delete) or form field (put/post); repeatable')
    p.add_argument('--key')
    p.add_argument('--password')
    p.add_argument('--url', default=env(URL_ENV, API_URL))
    p.add_argument('--api-version', default=env(VERSION_ENV, API_VER))
    p.add_argument('--timeout', type=float, default=30.0)
    p.add_argument('--no-throttle-wait', action='store_true')
    p.add_argument('--out', help='Write the response body to this file instead of stdout')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def render(response) -> str:
    ctype = response.headers.get('Content-Type', '')
    if 'application/json' in ctype:
        try:
            return json.dumps(response.json(), ensure_ascii=False, indent=2)
        except ValueError:
            pass
    return response.text


def main(argv: Optional[List[str]] = None) -> int:
    load_env_file(PROJECT_ROOT / '.env')
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='[%(levelname)s] %(message)s')
    try:
        with BasicClient(args.key, args.password, url=args.url, version=args.api_version,
                         throttle_wait=not args.no_throttle_wait, timeout=args.timeout) as client:
            response = getattr(client, args.method)(args.endpoint, args.id, parse_data(args.data))
    except ResponseError as e:
        logger.error('%s (%s)', e, e.response.text[:200])
        return 1
    except APIError as e:
        logger.error('%s', e)
        return 1

    body = render(response)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(body, encoding='utf-8')
        logger.info('Wrote %s', out_path)
    else:
        print(body)
    return 0


if __name__ == '__main__':
    sys.exit(main())
