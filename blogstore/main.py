#!/usr/bin/env python3
"""
Command line entry point: connect, ensure the schema, optionally run one operation
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from blogstore.config import Settings, get_settings
from blogstore.db.session import Database
from blogstore.exceptions import BlogStoreError, ConnectionFailureError
from blogstore.schemas.user_schema import UserInDB
from blogstore.services.comment_service import CommentService
from blogstore.services.post_service import PostService
from blogstore.services.seed_service import seed_sample_data
from blogstore.services.user_service import UserService, build_password_context

logger = logging.getLogger(__name__)

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

async def run_command(args: argparse.Namespace, database: Database) -> Optional[str]:
    """Run one command against an initialized database; returns JSON output"""
    if args.command == "check":
        if not await database.check_connection():
            raise ConnectionFailureError("Database connection failed")
        return None

    applied = await database.init_db()
    if args.command == "init":
        return json.dumps({"applied": applied})

    pwd_context = build_password_context(database.settings.BCRYPT_ROUNDS)
    async with database.session() as db:
        if args.command == "seed":
            user = await seed_sample_data(db, UserService(db, pwd_context))
            return UserInDB.model_validate(user).model_dump_json()

        if args.command == "user-posts":
            user = await UserService(db, pwd_context).get_user_with_posts_and_comments(args.user_id)
            return user.model_dump_json()

        if args.command == "most-commented":
            result = await PostService(db).get_post_with_most_comments()
            return result.model_dump_json()

        if args.command == "delete-comments":
            deleted = await CommentService(db).delete_comments_by_post(args.post_id)
            return json.dumps({"post_id": args.post_id, "deleted": deleted})

    raise ValueError(f"Unknown command: {args.command}")

async def _main(args: argparse.Namespace, settings: Settings) -> Optional[str]:
    database = Database(settings)
    try:
        return await run_command(args, database)
    finally:
        await database.close()

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blog data store")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create or update the database schema")
    subparsers.add_parser("check", help="Check database connection")
    subparsers.add_parser("seed", help="Insert the sample user, posts and comments")

    user_posts = subparsers.add_parser("user-posts", help="Show a user's posts with comments")
    user_posts.add_argument("user_id", type=int)

    subparsers.add_parser("most-commented", help="Show the post with the most comments")

    delete_comments = subparsers.add_parser("delete-comments", help="Delete all comments of a post")
    delete_comments.add_argument("post_id", type=int)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging(settings)

    try:
        output = asyncio.run(_main(args, settings))
    except ConnectionFailureError as e:
        logger.error(f"Cannot reach the database: {e}")
        return 1
    except BlogStoreError as e:
        logger.error(f"{args.command} failed: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user")
        return 1

    if output is not None:
        print(output)
    return 0

if __name__ == "__main__":
    sys.exit(main())
