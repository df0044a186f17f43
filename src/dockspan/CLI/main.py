"""
Command Line Interface for dockspan.
"""
import click
import json
import logging
import yaml
from ..MODELS.parser_config import ParserConfig
from ..PARSERS.dockerfile_parser import DockerfileParser
from ..PARSERS.errors import DockerfileParseError, UnexpectedTokenError

KINDS = ['from', 'arg', 'expose', 'user', 'workdir', 'misc']

@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--strict', is_flag=True, help='Reject directives without a dedicated model')
@click.pass_context
def cli(ctx, verbose, strict):
    """
    dockspan - span-annotated Dockerfile instruction parser.

    Parses Dockerfiles into typed instructions that point back at their source text.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)-8s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['parser'] = DockerfileParser(ParserConfig(allow_misc_instructions=not strict))

def _load(ctx, dockerfile):
    """
    Reads and parses a Dockerfile, reporting errors and exiting on failure.

    :return: The source text and the parsed AST.
    """
    parser = ctx.obj['parser']
    with open(dockerfile, 'r', encoding=parser.config.encoding) as f:
        content = f.read()
    try:
        return content, parser.parse_from_string(content)
    except UnexpectedTokenError as e:
        click.echo(f"Error: {e.render(content)}", err=True)
    except DockerfileParseError as e:
        click.echo(f"Error: {e}", err=True)
    ctx.exit(1)

@cli.command()
@click.argument('dockerfile', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'fmt', type=click.Choice(['json', 'yaml']), default='json')
@click.pass_context
def parse(ctx, dockerfile, fmt):
    """Dump the instruction AST of a Dockerfile."""
    _, ast = _load(ctx, dockerfile)
    data = ast.model_dump(mode='json')
    if fmt == 'yaml':
        click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(data, indent=2))

@cli.command()
@click.argument('dockerfile', type=click.Path(exists=True, dir_okay=False))
@click.option('--kind', '-k', type=click.Choice(KINDS), required=True, help='Instruction kind to list')
@click.pass_context
def show(ctx, dockerfile, kind):
    """List the instructions of one kind with their spans"""
    content, ast = _load(ctx, dockerfile)
    for inst in ast.instructions:
        if inst.kind != kind:
            continue
        click.echo(f"[{inst.span.start}, {inst.span.end}) {inst.span.slice(content)}")

def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
