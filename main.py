import argparse
import asyncio
import logging
import sys

from authclient import ApiError, AuthClient, ClientValidationError
from authclient.config import API_BASE_URL, log_configuration

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def _register(client: AuthClient, args) -> None:
    resp = await client.api.register(args.email, args.password, args.confirm)
    print(resp.message or "registration successful")


async def _login(client: AuthClient, args) -> None:
    user = await client.session.login(client.api, args.email, args.password)
    print(f"Logged in as {user.email if user else args.email}")


async def _dashboard(client: AuthClient, args) -> None:
    await client.session.login(client.api, args.email, args.password)
    redirect = client.session.guard()
    if redirect:
        print(f"Not authenticated, go to {redirect}")
        return
    user = client.session.user
    print(f"id:         {user.id}")
    print(f"email:      {user.email}")
    print(f"verified:   {'yes' if user.verified else 'no'}")
    print(f"created at: {user.created_at.isoformat()}")
    await client.session.logout(client.api)


COMMANDS = {
    "register": _register,
    "login": _login,
    "dashboard": _dashboard,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auth API client")
    parser.add_argument("--base-url", default=API_BASE_URL)
    sub = parser.add_subparsers(dest="command", required=True)
    for name in COMMANDS:
        cmd = sub.add_parser(name)
        cmd.add_argument("--email", required=True)
        cmd.add_argument("--password", required=True)
        if name == "register":
            cmd.add_argument("--confirm", default=None, help="password confirmation")
    return parser


async def run(args) -> int:
    async with AuthClient(base_url=args.base_url) as client:
        try:
            await COMMANDS[args.command](client, args)
        except ClientValidationError as e:
            print(f"error: {e.detail}", file=sys.stderr)
            return 1
        except ApiError as e:
            print(f"error: {e.detail}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    log_configuration()
    sys.exit(asyncio.run(run(build_parser().parse_args())))
