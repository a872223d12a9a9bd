"""CLI interface for x-cli.

Commands:
    post    - Post a tweet (optionally with media)
    quote   - Quote a tweet
    reply   - Reply to a tweet
    delete  - Delete a tweet
    setup   - Save API credentials to the config file
    status  - Show where each credential is resolved from
    help    - Show usage

This module is the only place that decides exit codes: 0 on success or
help, 1 on any error.
"""

import sys
from contextlib import contextmanager
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    CREDENTIAL_SPECS,
    AppConfig,
    config_exists,
    load_config,
    load_environment,
    lookup_credential,
    resolve_credentials,
    save_config,
)
from .errors import ApiError, ConfigurationError, NetworkError, ValidationError
from .logging_config import setup_logging
from .models import Post, Quote, Reply
from .refs import resolve_tweet_id, tweet_url
from .validation import validate_tweet_text

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

# Text starting with "-" (e.g. "-5 degrees") would be read as an option;
# "--" ends option parsing.
USAGE = {
    "post": 'Usage: x-cli post [--media PATH]... [--] "Your tweet here"',
    "quote": 'Usage: x-cli quote [--media PATH]... [--] <id|url> "Your comment"',
    "reply": 'Usage: x-cli reply [--media PATH]... [--] <id|url> "Your reply"',
    "delete": "Usage: x-cli delete <id|url>",
}

media_option = click.option(
    "--media",
    "-m",
    "media",
    multiple=True,
    type=click.Path(),
    metavar="PATH",
    help="Attach a media file (repeatable, uploaded in order)",
)


class CommandGroup(click.Group):
    """Group that reports usage errors (unknown command, bad option) with exit 1.

    Group options are parsed in ``make_context``; subcommands and their
    options are resolved and parsed in ``invoke``.
    """

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@contextmanager
def error_boundary():
    """Turn x-cli errors into a message on stderr and exit code 1."""
    try:
        yield
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        if e.usage:
            click.echo(e.usage, err=True)
        sys.exit(1)
    except ConfigurationError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except (ApiError, NetworkError) as e:
        click.echo(f"✗ Failed: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        # Config and .env read failures arrive as ConfigurationError
        click.echo(f"Error: cannot read media file {e.filename}: {e.strerror}", err=True)
        sys.exit(1)


@click.group(
    cls=CommandGroup,
    invoke_without_command=True,
    context_settings=CONTEXT_SETTINGS,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """x-cli — Post, quote, reply to and delete posts on X (Twitter)."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@main.command("help")
@click.pass_context
def help_command(ctx):
    """Show this help and exit."""
    click.echo(ctx.parent.get_help())


def _resolve(ctx):
    """Load config and credentials for an action command."""
    config = load_config(ctx.obj["config_path"])
    credentials = resolve_credentials(env=load_environment(), config=config)
    return config, credentials


def _publish(ctx, make_request, words, media, usage, action):
    text = " ".join(words)

    with error_boundary():
        validate_tweet_text(text, usage=usage)
        config, credentials = _resolve(ctx)

        click.echo(f'{action} "{text}"')

        # Lazy import so --help stays fast
        from .client import XClient

        with XClient(credentials, timeout=config.timeout) as client:
            if media:
                click.echo(f"Uploading {len(media)} media file(s)...")
            media_ids = client.upload_all_media(list(media))
            result = client.create_tweet(make_request(text, media_ids))

    click.echo("✓ Posted!")
    click.echo(f"  {tweet_url(result.tweet_id)}")


def _require_target(target, usage):
    if not target or not target.strip():
        raise ValidationError("Missing tweet ID or URL.", usage=usage)
    return resolve_tweet_id(target)


@main.command()
@media_option
@click.argument("words", nargs=-1)
@click.pass_context
def post(ctx, media, words):
    """Post a tweet. WORDS are joined with spaces.

    Put -- before text that starts with a dash: x-cli post -- -5 degrees
    """
    _publish(
        ctx,
        lambda text, media_ids: Post(text=text, media_ids=media_ids),
        words,
        media,
        USAGE["post"],
        "Posting:",
    )


@main.command()
@media_option
@click.argument("target", required=False)
@click.argument("words", nargs=-1)
@click.pass_context
def quote(ctx, media, target, words):
    """Quote TARGET (tweet ID or URL) with a comment."""
    with error_boundary():
        tweet_id = _require_target(target, USAGE["quote"])

    _publish(
        ctx,
        lambda text, media_ids: Quote(
            text=text, quote_tweet_id=tweet_id, media_ids=media_ids
        ),
        words,
        media,
        USAGE["quote"],
        f"Quoting {tweet_url(tweet_id)}:",
    )


@main.command()
@media_option
@click.argument("target", required=False)
@click.argument("words", nargs=-1)
@click.pass_context
def reply(ctx, media, target, words):
    """Reply to TARGET (tweet ID or URL)."""
    with error_boundary():
        tweet_id = _require_target(target, USAGE["reply"])

    _publish(
        ctx,
        lambda text, media_ids: Reply(
            text=text, in_reply_to_tweet_id=tweet_id, media_ids=media_ids
        ),
        words,
        media,
        USAGE["reply"],
        f"Replying to {tweet_url(tweet_id)}:",
    )


@main.command()
@click.argument("target", required=False)
@click.pass_context
def delete(ctx, target):
    """Delete TARGET (tweet ID or URL)."""
    from .client import XClient

    with error_boundary():
        tweet_id = _require_target(target, USAGE["delete"])
        config, credentials = _resolve(ctx)

        click.echo(f"Deleting {tweet_url(tweet_id)}")
        with XClient(credentials, timeout=config.timeout) as client:
            result = client.delete_tweet(tweet_id)

    if result.deleted:
        click.echo("✓ Deleted!")
    else:
        click.echo(
            "⚠ Delete request was accepted but the API did not confirm the "
            "deletion. Check the post manually.",
            err=True,
        )


@main.command()
@click.pass_context
def setup(ctx):
    """Save API credentials to the config file."""
    config_path = ctx.obj["config_path"]

    click.echo("x-cli — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("You need the four OAuth 1.0a keys of your X developer app")
    click.echo("(Keys and tokens tab, with Read and Write permissions).")
    click.echo()

    with error_boundary():
        existing = load_config(config_path)

    auth = {}
    for spec in CREDENTIAL_SPECS:
        auth[spec.key] = click.prompt(spec.key, hide_input=True)

    save_config(AppConfig(auth=auth, timeout=existing.timeout), config_path)
    click.echo(f"\nConfig saved to {config_path}")
    click.echo("Environment variables still take precedence over this file.")


@main.command()
@click.pass_context
def status(ctx):
    """Show where each credential is resolved from."""
    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)

    click.echo("x-cli — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured'} ({config_path})")

    with error_boundary():
        config = load_config(config_path)
        env = load_environment()

    missing = 0
    for spec in CREDENTIAL_SPECS:
        value, source = lookup_credential(spec, env, config)
        if value:
            click.echo(f"  {spec.label}: set ({source})")
        else:
            missing += 1
            click.echo(f"  {spec.label}: missing")

    if missing:
        click.echo("\nRun 'x-cli setup' or set the missing variables to get started.")
