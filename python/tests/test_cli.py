import json

from numbered_refs import *
from numbered_refs.cli.__main__ import main
from numbered_refs.doc.codec import from_dict, to_dict


def write_doc(tmp_path, doc: Node):
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(to_dict(doc)), encoding="utf-8")
    return path


def sample() -> Node:
    return document(
        [
            paragraph(
                [
                    macro(
                        "reference",
                        [reference_placeholder("A", ReferenceKind.SECTION)],
                        inline=True,
                        parameters={"section": "A"},
                    )
                ]
            ),
            section([header([id_marker("A"), *words("Title")])]),
            figure([paragraph([image("a.png")]), figure_caption(words("Caption"))]),
        ]
    )


def test_prints_events(tmp_path, capsys):
    assert main([str(write_doc(tmp_path, sample()))]) == 0
    out = capsys.readouterr().out
    assert out.startswith("beginDocument\n")
    assert "beginLink [anchor=[A]]" in out
    assert "beginFormat [[class]=[wikigeneratedfigurenumber]]" in out


def test_prints_json(tmp_path, capsys):
    assert main([str(write_doc(tmp_path, sample())), "--json"]) == 0
    doc = from_dict(json.loads(capsys.readouterr().out))
    assert text_content(doc) == "11 TitleFigure 1: Caption"


def test_passes_can_be_switched_off(tmp_path, capsys):
    assert main([str(write_doc(tmp_path, sample())), "--json", "--no-headings"]) == 0
    doc = from_dict(json.loads(capsys.readouterr().out))
    assert text_content(doc.children[1]) == "Title"
    assert doc.children[0].children[0].children[0].role is Role.PLACEHOLDER


def test_protect_replaces_default(tmp_path, capsys):
    doc = document([macro("code", [section([header(words("Code"))])])])
    assert main([str(write_doc(tmp_path, doc)), "--json", "--protect", "html"]) == 0
    out = from_dict(json.loads(capsys.readouterr().out))
    assert text_content(out) == "1 Code"


def test_missing_file_fails(tmp_path, capsys):
    assert main([str(tmp_path / "nope.json")]) == 1
    assert "numbered-refs:" in capsys.readouterr().err


def test_non_document_root_fails(tmp_path, capsys):
    path = tmp_path / "para.json"
    path.write_text(json.dumps(to_dict(paragraph(words("x")))), encoding="utf-8")
    assert main([str(path)]) == 1
    assert "not a document" in capsys.readouterr().err


def test_non_object_json_fails(tmp_path, capsys):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([{"role": "document"}]), encoding="utf-8")
    assert main([str(path)]) == 1
    assert "JSON object" in capsys.readouterr().err
