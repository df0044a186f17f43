import pytest
from dockspan.MODELS.dockerfile_ast import ExposeInstruction, MiscInstruction
from dockspan.MODELS.parse_node import Rule
from dockspan.MODELS.parser_config import ParserConfig
from dockspan.PARSERS.dockerfile_parser import DockerfileParser
from dockspan.MODELS.span import Span
from dockspan.PARSERS.errors import DockerfileSyntaxError, UnexpectedTokenError, line_and_column

CONTENT = """\
# build stage
FROM --platform=linux/amd64 python:3.12-slim AS build
ARG VERSION=1.0
WORKDIR /app

COPY . .
RUN pip install -r requirements.txt \\
    && echo "done"
EXPOSE 8000/tcp 9000
USER app:app
CMD ["python", "app.py"]
"""

def test_parse_from_string():
    parser = DockerfileParser()
    ast = parser.parse_from_string(CONTENT)

    kinds = [i.kind for i in ast.instructions]
    assert kinds == ["from", "arg", "workdir", "misc", "misc", "expose", "user", "misc"]

    # Every span slices back to the directive text
    lines = [line for line in CONTENT.splitlines() if line and not line.startswith("#")]
    assert ast.instructions[0].span.slice(CONTENT) == lines[0]
    for inst in ast.instructions:
        text = inst.span.slice(CONTENT)
        assert text == text.strip()
        assert inst.root.span.start >= 0

    from_ = ast.instructions[0].into_from()
    assert [f.content for f in from_.flags] == ["--platform=linux/amd64"]
    assert from_.image.content == "python:3.12-slim"
    assert from_.alias.content == "build"

    arg = ast.instructions[1].into_arg()
    assert arg.name.content == "VERSION"
    assert arg.value.content == "1.0"

    assert ast.instructions[2].into_workdir().workdir.content == "/app"

    # Check RUN with line continuation
    run = ast.instructions[4].into_misc()
    assert run.instruction.content == "RUN"
    assert run.arguments.content.startswith("pip install")
    assert run.arguments.content.endswith('&& echo "done"')

    expose = ast.instructions[5].into_expose()
    assert [v.port.content for v in expose.vars] == [8000, 9000]

    user = ast.instructions[6].into_user()
    assert user.user.content == "app"
    assert user.group.content == "app"

    cmd = ast.instructions[7].into_misc()
    assert cmd.arguments.content == '["python", "app.py"]'

    assert ast.of_kind(ExposeInstruction) == [expose]
    assert len(ast.of_kind(MiscInstruction)) == 3

def test_parse_file(tmp_path):
    dockerfile = tmp_path / "Dockerfile"
    dockerfile.write_text("FROM scratch\nEXPOSE 80\n")
    ast = DockerfileParser().parse(str(dockerfile))
    assert [i.kind for i in ast.instructions] == ["from", "expose"]

def test_empty_and_comment_only():
    parser = DockerfileParser()
    assert parser.parse_from_string("").instructions == []
    assert parser.parse_from_string("   \n\t  \n").instructions == []
    assert parser.parse_from_string("# only a comment\n").instructions == []

def test_keyword_prefix_is_misc():
    ast = DockerfileParser().parse_from_string("USERADD foo\n")
    misc = ast.instructions[0].into_misc()
    assert misc.instruction.content == "USERADD"

def test_strict_mode_rejects_misc():
    parser = DockerfileParser(ParserConfig(allow_misc_instructions=False))
    content = "FROM scratch\nRUN true\n"
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parser.parse_from_string(content)
    assert excinfo.value.node.text == "RUN"
    rendered = excinfo.value.render(content)
    assert rendered.startswith("line 2, column 1:")
    assert rendered.endswith("RUN true\n^^^")

def test_syntax_error():
    with pytest.raises(DockerfileSyntaxError) as excinfo:
        DockerfileParser().parse_from_string("FROM scratch\nEXPOSE http\n")
    assert excinfo.value.line == 2

def test_parse_single_rejects_value_rule():
    with pytest.raises(ValueError):
        DockerfileParser().parse_single("foo", Rule.USER_NAME)

def test_parse_tree():
    root = DockerfileParser().parse_tree("expose 8000/udp", Rule.EXPOSE)
    assert root.rule == Rule.EXPOSE
    assert (root.start, root.end) == (0, 15)
    port = root.children[0]
    assert port.rule == Rule.EXPOSE_PORT
    assert port.text == "8000/udp"
    assert [c.rule for c in port.children] == [Rule.EXPOSE_PORT_NUMBER, Rule.EXPOSE_PROTOCOL]

def test_spans_are_byte_offsets():
    content = "user josé\nexpose 80\n"
    ast = DockerfileParser().parse_from_string(content)
    assert ast.span == Span.new(0, 21)

    user = ast.instructions[0].into_user()
    assert user.user.content == "josé"
    assert user.user.span == Span.new(5, 10)

    expose = ast.instructions[1].into_expose()
    assert expose.span == Span.new(11, 20)
    assert expose.vars[0].port.span == Span.new(18, 20)
    assert expose.span.slice(content) == "expose 80"
    assert user.span.slice(content) == "user josé"

def test_line_and_column_counts_characters():
    assert line_and_column("é: x", 3) == (1, 3)
    assert line_and_column("ü\nRUN", 3) == (2, 1)

def test_strict_mode_render_after_non_ascii():
    parser = DockerfileParser(ParserConfig(allow_misc_instructions=False))
    content = "USER josé\nRUN true\n"
    with pytest.raises(UnexpectedTokenError) as excinfo:
        parser.parse_from_string(content)
    assert excinfo.value.span == Span.new(11, 14)
    assert excinfo.value.render(content).endswith("\nRUN true\n^^^")

def test_comment_only_at_line_start():
    content = "  # indented comment\nFROM scratch\n# another\nEXPOSE 80\n"
    ast = DockerfileParser().parse_from_string(content)
    assert [i.kind for i in ast.instructions] == ["from", "expose"]

def test_hash_after_expose_ports_is_an_error():
    with pytest.raises(DockerfileSyntaxError) as excinfo:
        DockerfileParser().parse_from_string("EXPOSE 80 # web\n")
    assert (excinfo.value.line, excinfo.value.column) == (1, 11)

def test_hash_inside_user_name_is_kept():
    content = "USER foo # comment\n"
    user = DockerfileParser().parse_from_string(content).instructions[0].into_user()
    assert user.user.content == "foo # comment"
    assert user.span.slice(content) == "USER foo # comment"

def test_comment_line_inside_continuation():
    content = "EXPOSE 80 \\\n# c\n  443\n"
    ast = DockerfileParser().parse_from_string(content)
    assert len(ast.instructions) == 1
    expose = ast.instructions[0].into_expose()
    assert [v.port.content for v in expose.vars] == [80, 443]
    assert expose.span == Span.new(0, 21)
    assert expose.vars[1].port.span == Span.new(18, 21)

def test_arg_with_empty_default():
    ast = DockerfileParser().parse_from_string("ARG FOO=\nARG BAR\n")
    foo = ast.instructions[0].into_arg()
    assert foo.name.content == "FOO"
    assert foo.value.content == ""
    assert foo.value.span == Span.new(8, 8)
    assert foo.span == Span.new(0, 8)
    assert ast.instructions[1].into_arg().value is None
