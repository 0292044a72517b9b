"""DOCX property extraction through both strategies."""

from __future__ import annotations

from pathlib import Path

import pytest

from fileinfo.tools import ooxml
from tests.utils import APP_XML, CORE_XML, EXPECTED_PROPERTIES, build_docx, completed, make_context


def _fake_xmlstarlet(cmd, *, input=None, **kwargs):
    """Answer ``xmlstarlet sel`` the way the real tool prints concat() results."""

    assert cmd[:2] == ["xmlstarlet", "sel"]
    joined = " ".join(cmd)
    if "dcterms:created" in joined:
        assert "dcterms=http://purl.org/dc/terms/" in joined
        assert "<dc:creator>" in input
        return completed(
            stdout="created:2024-01-12T09:15:00Z\n"
            "modified:2024-02-03T17:45:30Z\n"
            "creator:Jane Doe\n"
            "title:Quarterly Report\n"
        )
    assert "<TotalTime>" in input
    return completed(
        stdout="application:Microsoft Office Word\ntotal_edit_minutes:42\npages:7\n"
    )


def test_regex_extractor_tolerates_noise() -> None:
    extractor = ooxml.RegexExtractor()

    core = extractor.extract(CORE_XML, ooxml.CORE_FIELDS)
    app = extractor.extract(APP_XML, ooxml.APP_FIELDS)

    assert {**core, **app} == EXPECTED_PROPERTIES


def test_regex_extractor_omits_missing_and_empty_fields() -> None:
    xml = "<cp:coreProperties><dc:title>  </dc:title><dc:creator/><dc:creator>A &amp; B</dc:creator></cp:coreProperties>"

    values = ooxml.RegexExtractor().extract(xml, ooxml.CORE_FIELDS)

    assert values == {"creator": "A & B"}


def test_regex_extractor_decodes_references_and_cdata() -> None:
    xml = (
        "<cp:coreProperties>"
        "<dc:title>Caf&#233; &#x4E2D; &lt;draft&gt;</dc:title>"
        "<dc:creator><![CDATA[A & B &amp; C]]></dc:creator>"
        "</cp:coreProperties>"
    )

    values = ooxml.RegexExtractor().extract(xml, ooxml.CORE_FIELDS)

    assert values == {"title": "Caf\u00e9 \u4e2d <draft>", "creator": "A & B &amp; C"}


def test_xmlstarlet_command_is_namespace_aware() -> None:
    command = ooxml.XmlStarletExtractor().command(ooxml.CORE_FIELDS)

    assert command[:2] == ["xmlstarlet", "sel"]
    assert "cp=http://schemas.openxmlformats.org/package/2006/metadata/core-properties" in command
    assert 'concat("created:", normalize-space(/cp:coreProperties/dcterms:created))' in command
    assert command.count("-n") == len(ooxml.CORE_FIELDS)


def test_xmlstarlet_extractor_drops_empty_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        ooxml,
        "run_cmd",
        lambda cmd, **kwargs: completed(stdout="created:\nmodified: 2024-02-03T17:45:30Z \ncreator:\ntitle:\n"),
    )

    values = ooxml.XmlStarletExtractor().extract(CORE_XML, ooxml.CORE_FIELDS)

    assert values == {"modified": "2024-02-03T17:45:30Z"}


@pytest.mark.parametrize("strategy", ["xmlstarlet", "regex"])
def test_docx_lines_same_fields_for_both_strategies(
    docx_file: Path, monkeypatch: pytest.MonkeyPatch, strategy: str
) -> None:
    tools = {"xmlstarlet"} if strategy == "xmlstarlet" else set()
    monkeypatch.setattr(ooxml, "run_cmd", _fake_xmlstarlet)
    ctx = make_context(docx_file, tools=tools)

    lines = ooxml.docx_lines(ctx)

    fields = [line for line in lines if not line.startswith(("--", "unzip"))]
    assert fields == [f"{key}:{EXPECTED_PROPERTIES[key]}" for key in ooxml.PROPERTY_KEYS]
    headers = [line for line in lines if line.startswith("--")]
    if strategy == "regex":
        assert headers == ["-- core.xml (regex fallback) --", "-- app.xml (regex fallback) --"]
    else:
        assert headers == ["-- core.xml --", "-- app.xml --"]


def test_docx_lines_non_container(sample_file: Path) -> None:
    ctx = make_context(sample_file)

    assert ooxml.docx_lines(ctx) == ["(Not a ZIP container; skipping DOCX internals)"]


def test_docx_lines_zip_without_doc_props(tmp_path: Path) -> None:
    archive = build_docx(tmp_path / "plain.zip", members={})
    ctx = make_context(archive)

    lines = ooxml.docx_lines(ctx)

    assert lines[0] == "unzip not installed; reading archive in-process."
    assert lines[-1] == "(no docProps/core.xml or docProps/app.xml in container)"


def test_docx_lines_core_only(tmp_path: Path) -> None:
    archive = build_docx(tmp_path / "core-only.docx", members={"docProps/core.xml": CORE_XML})
    ctx = make_context(archive)

    props = ooxml.document_properties(ctx)

    assert list(props) == ["core.xml"]
    assert props["core.xml"]["creator"] == "Jane Doe"


def test_unzip_is_used_when_available(docx_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, **kwargs):
        calls.append([str(part) for part in cmd])
        if cmd[:2] == ["unzip", "-l"]:
            return completed(stdout="Archive: report.docx\n")
        if cmd[:2] == ["unzip", "-p"]:
            member = cmd[-1]
            if member == ooxml.CORE_MEMBER:
                return completed(stdout=CORE_XML)
            return completed(stderr="caution: filename not matched", returncode=11)
        raise AssertionError(f"unexpected command {cmd}")

    monkeypatch.setattr(ooxml, "run_cmd", fake_run)
    ctx = make_context(docx_file, tools={"unzip"})

    lines = ooxml.docx_lines(ctx)

    assert calls[0] == ["unzip", "-l", str(docx_file)]
    assert ["unzip", "-p", str(docx_file), "docProps/app.xml"] in calls
    assert lines[0] == "-- core.xml (regex fallback) --"
    assert "title:Quarterly Report" in lines
    assert not any(line.startswith("application:") for line in lines)


def test_is_zip_container_via_unzip_exit_code(sample_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        ooxml,
        "run_cmd",
        lambda cmd, **kwargs: completed(stderr="End-of-central-directory signature not found.", returncode=9),
    )
    ctx = make_context(sample_file, tools={"unzip"})

    assert ooxml.is_zip_container(ctx) is False
