"""
Entry point for the Vesta client.
This module provides a command-line interface to the marketplace backend.
"""

import argparse

from Vesta.core.logging import auto_configure
from Vesta.start import client


def parse(argv=None):
    # Initialize argument parser for command line interface
    parser = argparse.ArgumentParser(prog='vesta', description='Vesta marketplace client')
    parser.add_argument('--api-url', default=None, help='REST API root (default: VESTA_API_URL or http://localhost:8080/api)')
    parser.add_argument('--state-dir', default=None, help='Local storage directory (default: VESTA_STATE_DIR or ~/.vesta)')
    parser.add_argument('--env', default=None, help='Logging preset: development, production or testing')
    subparsers = parser.add_subparsers(dest='command', required=True, help='Available commands')

    login_parser = subparsers.add_parser('login', help='Log in and store the session')
    login_parser.add_argument('username', help='Account username')
    login_parser.add_argument('--password', default=None, help='Password (prompted when omitted)')

    subparsers.add_parser('logout', help='Forget the stored session')

    notifications_parser = subparsers.add_parser('notifications', help='List notifications')
    notifications_parser.add_argument('--read', type=int, nargs='*', default=[], metavar='ID',
                                      help='Mark notifications read')
    notifications_parser.add_argument('--mark-all', action='store_true', help='Mark every notification read')

    conversations_parser = subparsers.add_parser('conversations', help='List or open conversations')
    conversations_parser.add_argument('--open', type=int, default=None, metavar='USER_ID',
                                      help='Open the conversation with a user')
    conversations_parser.add_argument('--send', default=None, metavar='TEXT',
                                      help='Send a message in the opened conversation')
    conversations_parser.add_argument('--listing', type=int, default=None, metavar='LISTING_ID',
                                      help='Listing the message refers to')

    compare_parser = subparsers.add_parser('compare', help='Compare listings side by side')
    compare_parser.add_argument('ids', type=int, nargs='+', help='Listing ids (2 or 3)')
    compare_parser.add_argument('--category', default='REAL_ESTATE',
                                choices=['REAL_ESTATE', 'VEHICLE', 'LAND', 'WORKPLACE'],
                                help='Listing category (default: REAL_ESTATE)')

    watch_parser = subparsers.add_parser('watch', help='Follow notifications and messages live')
    watch_parser.add_argument('--ws-url', default=None, help='STOMP WebSocket endpoint (default: VESTA_WS_URL)')
    watch_parser.add_argument('--listing', type=int, nargs='*', default=[], metavar='LISTING_ID',
                              help='Also follow the favorite count of these listings')

    return parser.parse_args(argv)


def main(argv=None):
    args = parse(argv)
    auto_configure(args.env)

    if args.command == 'login':
        client.login(args.username, args.password, api_url=args.api_url, state_dir=args.state_dir)
    elif args.command == 'logout':
        client.logout(state_dir=args.state_dir)
    elif args.command == 'notifications':
        client.notifications(args.mark_all, args.read, api_url=args.api_url, state_dir=args.state_dir)
    elif args.command == 'conversations':
        if args.send and args.open is None:
            raise SystemExit('--send needs --open USER_ID')
        client.conversations(args.open, args.send, args.listing, api_url=args.api_url, state_dir=args.state_dir)
    elif args.command == 'compare':
        client.compare(args.ids, args.category, api_url=args.api_url, state_dir=args.state_dir)
    elif args.command == 'watch':
        client.watch(args.listing, api_url=args.api_url, ws_url=args.ws_url, state_dir=args.state_dir)
    else:
        raise Exception('Unknown command')


if __name__ == '__main__':
    main()
