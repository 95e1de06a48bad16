import click

from cli.replay_fixture import replay_fixture
from cli.stream_blocks import stream_blocks


@click.group()
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx):
    pass


# Live multi-chain streaming
cli.add_command(stream_blocks, "stream_blocks")

# Deterministic replay of a recorded stream
cli.add_command(replay_fixture, "replay_fixture")
