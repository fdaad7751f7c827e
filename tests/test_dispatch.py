# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

import pytest

from fmtbridge.config import DispatcherConfig
from fmtbridge.core.type_aliases import TagName
from fmtbridge.dispatch import (
    TAG_TO_PARSER,
    DispatcherClosedError,
    Failed,
    FormatDispatcher,
    FormatEmbeddedRequest,
    FormatFileRequest,
    Formatted,
    attempt_format,
    parser_for_tag,
    with_overrides,
)
from fmtbridge.engines import EngineLoader, EngineLoadError
from tests.fixtures.engines import (
    FAKE_ENGINE,
    AsyncRecordingEngine,
    CountingImporter,
    RecordingEngine,
    make_project,
)

pytestmark = pytest.mark.unit


def _dispatcher_for(engine: object) -> FormatDispatcher:
    loader = EngineLoader(DispatcherConfig(engine=FAKE_ENGINE), importer=CountingImporter(engine))
    return FormatDispatcher(loader=loader)


def test_format_file_overrides_parser_and_filepath(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
) -> None:
    options = {"parser": "typescript", "filepath": "other.ts", "tabWidth": 4}
    request = FormatFileRequest(
        code="let x=1",
        parser_name="babel",
        file_name="a.js",
        options=options,
    )

    result = asyncio.run(dispatcher.format_file(request))

    assert result == "LET X=1\n\n"
    assert default_engine.calls == [
        ("let x=1", {"parser": "babel", "filepath": "a.js", "tabWidth": 4}),
    ]
    assert options == {"parser": "typescript", "filepath": "other.ts", "tabWidth": 4}


def test_format_file_propagates_engine_errors_unchanged(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
) -> None:
    error = SyntaxError("Unexpected token (1:5)")
    default_engine.error = error
    request = FormatFileRequest(code="let =", parser_name="babel", file_name="a.js")

    with pytest.raises(SyntaxError) as excinfo:
        _ = asyncio.run(dispatcher.format_file(request))
    assert excinfo.value is error


def test_format_file_awaits_async_engine() -> None:
    engine = AsyncRecordingEngine()
    dispatcher = _dispatcher_for(engine)
    request = FormatFileRequest(code="# hi", parser_name="markdown", file_name="README.md")

    assert asyncio.run(dispatcher.format_file(request)) == "async:# hi\n"


def test_format_file_uses_workspace_engine(dispatcher: FormatDispatcher, tmp_path: Path) -> None:
    root = make_project(tmp_path / "project")

    async def scenario() -> tuple[str, str]:
        workspace_id = await dispatcher.create_workspace(root)
        local = await dispatcher.format_file(
            FormatFileRequest("a{}", "css", str(root / "a.css"), workspace_id),
        )
        default = await dispatcher.format_file(FormatFileRequest("a{}", "css", "a.css", 0))
        return local, default

    local, default = asyncio.run(scenario())
    assert local == "local[css]:a{}"
    assert default == "A{}\n\n"


def test_format_file_fails_when_default_engine_unavailable() -> None:
    loader = EngineLoader(importer=CountingImporter(None, error=ImportError("missing")))
    dispatcher = FormatDispatcher(loader=loader)

    with pytest.raises(EngineLoadError):
        _ = asyncio.run(dispatcher.format_file(FormatFileRequest("a", "css", "a.css")))


def test_embedded_code_is_formatted_and_trimmed(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
) -> None:
    request = FormatEmbeddedRequest(code="color: red", tag_name="styled", options={"semi": False})

    result = asyncio.run(dispatcher.format_embedded_code(request))

    assert result == "COLOR: RED"
    assert default_engine.calls == [("color: red", {"semi": False, "parser": "css"})]


def test_embedded_options_never_include_filepath(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
) -> None:
    request = FormatEmbeddedRequest(code="query { a }", tag_name="gql")
    _ = asyncio.run(dispatcher.format_embedded_code(request))
    ((_, options),) = default_engine.calls
    assert "filepath" not in options
    assert options["parser"] == "graphql"


@pytest.mark.parametrize(("tag", "parser"), sorted(TAG_TO_PARSER.items()))
def test_each_tag_maps_to_its_parser(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
    tag: str,
    parser: str,
) -> None:
    _ = asyncio.run(dispatcher.format_embedded_code(FormatEmbeddedRequest("x", tag)))
    assert default_engine.calls[0][1]["parser"] == parser
    assert parser_for_tag(tag) == parser


def test_unknown_tag_returns_code_without_calling_engine(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
    importer: CountingImporter,
) -> None:
    request = FormatEmbeddedRequest(code="SELECT  1 ", tag_name="sql")
    assert asyncio.run(dispatcher.format_embedded_code(request)) == "SELECT  1 "
    assert default_engine.calls == []
    assert importer.count == 0


def test_embedded_engine_failure_returns_original(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
) -> None:
    default_engine.error = ValueError("CssSyntaxError: Unclosed block")
    request = FormatEmbeddedRequest(code="a {", tag_name="css")
    assert asyncio.run(dispatcher.format_embedded_code(request)) == "a {"


def test_embedded_default_load_failure_returns_original() -> None:
    loader = EngineLoader(importer=CountingImporter(None, error=ImportError("missing")))
    dispatcher = FormatDispatcher(loader=loader)
    request = FormatEmbeddedRequest(code="# title  ", tag_name="markdown")
    assert asyncio.run(dispatcher.format_embedded_code(request)) == "# title  "


def test_embedded_always_uses_default_engine(
    dispatcher: FormatDispatcher,
    default_engine: RecordingEngine,
    tmp_path: Path,
) -> None:
    root = make_project(tmp_path / "project")

    async def scenario() -> str:
        _ = await dispatcher.create_workspace(root)
        return await dispatcher.format_embedded_code(FormatEmbeddedRequest("<p>", "html"))

    assert asyncio.run(scenario()) == "<P>"
    assert len(default_engine.calls) == 1


def test_closed_dispatcher_rejects_work(dispatcher: FormatDispatcher, tmp_path: Path) -> None:
    async def scenario() -> None:
        async with dispatcher:
            _ = await dispatcher.create_workspace(tmp_path)
        assert dispatcher.closed
        assert len(dispatcher.workspaces) == 0
        await dispatcher.aclose()
        with pytest.raises(DispatcherClosedError):
            _ = await dispatcher.format_file(FormatFileRequest("a", "css", "a.css"))
        with pytest.raises(DispatcherClosedError):
            _ = await dispatcher.format_embedded_code(FormatEmbeddedRequest("a", "css"))
        with pytest.raises(DispatcherClosedError):
            _ = await dispatcher.create_workspace(tmp_path)

    asyncio.run(scenario())


def test_initialize_reports_no_plugin_languages(dispatcher: FormatDispatcher) -> None:
    assert asyncio.run(dispatcher.initialize()) == []
    assert asyncio.run(dispatcher.resolve_plugins()) == []


def test_format_results_unwrap() -> None:
    assert Formatted("b").unwrap_or("a") == "b"
    assert Formatted("b").ok
    failed = Failed(RuntimeError("x"))
    assert failed.unwrap_or("a") == "a"
    assert not failed.ok


def test_attempt_format_captures_failures() -> None:
    engine = RecordingEngine(error=RuntimeError("boom"))
    result = asyncio.run(attempt_format(engine, "a", {}))
    assert isinstance(result, Failed)
    assert str(result.error) == "boom"


def test_with_overrides_copies_options() -> None:
    options = {"parser": "css", "semi": True}
    merged = with_overrides(options, parser="scss")
    assert merged == {"parser": "scss", "semi": True}
    assert options["parser"] == "css"


def test_engine_factory_module_serves_requests() -> None:
    engine = RecordingEngine(suffix="")
    dispatcher = _dispatcher_for(SimpleNamespace(create_engine=lambda: engine))
    request = FormatFileRequest(code="x", parser_name="css", file_name="x.css")
    assert asyncio.run(dispatcher.format_file(request)) == "X"


def test_tag_table_is_keyed_by_tag_name() -> None:
    assert parser_for_tag(TagName("styled")) == "css"
    assert parser_for_tag("sql") is None
    assert all(isinstance(tag, str) for tag in TAG_TO_PARSER)
