import pytest
from shapes import Line, Point

from jsonshape import DateFormat, Int32, JsonSerializer, MalformedJson, NoMatch, TypeRegistry
from jsonshape.__main__ import main

LINE = '{"Start":{"X":1,"Y":2},"End":{"X":3,"Y":4}}'


def test_roundtrip(serializer):
    line = serializer.deserialize(LINE)
    assert line == Line(Point(Int32(1), Int32(2)), Point(Int32(3), Int32(4)))
    assert serializer.serialize(line) == LINE


def test_deserialize_errors(serializer):
    with pytest.raises(NoMatch):
        serializer.deserialize('[1,2]')
    with pytest.raises(NoMatch):
        serializer.deserialize('{"Z":1}')
    with pytest.raises(MalformedJson):
        serializer.deserialize('{"Start":')


def test_date_format():
    s = JsonSerializer()
    assert s.date_format is DateFormat.ISO8601

    s.date_format = 'ajax'
    assert s.date_format is DateFormat.AJAX

    with pytest.raises(ValueError):
        s.date_format = 'rfc822'


def test_snapshot():
    registry = TypeRegistry([Point])
    s = JsonSerializer(registry, policy='last')
    assert isinstance(s.deserialize('{"X":1}'), Point)

    registry.register(Line)
    with pytest.raises(NoMatch):
        s.deserialize('{"Start":{"X":1}}')

    s.snapshot()
    assert isinstance(s.deserialize('{"Start":{"X":1}}'), Line)


def test_empty_registry():
    with pytest.raises(NoMatch):
        JsonSerializer().deserialize('{"X":1}')


##
## command line
##


def test_cli_normalize(tmp_path, capsys):
    path = tmp_path / 'data.json'
    path.write_text('{ "b" : [1, 2.50, "\\u00e9"] }')

    assert main([str(path)]) == 0
    assert capsys.readouterr().out == '{"b":[1,2.5,"\\u00e9"]}\n'


def test_cli_deserialize(tmp_path, capsys):
    path = tmp_path / 'line.json'
    path.write_text(LINE)

    assert main([str(path), '-m', 'shapes', '--policy', 'last']) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith('Line(Start=Point(X=Int32(1)')
    assert out[1] == LINE


def test_cli_errors(tmp_path):
    path = tmp_path / 'bad.json'
    path.write_text('{"a":')

    assert main([str(path)]) == 1
    assert main([str(tmp_path / 'missing.json')]) == 1
    assert main([str(path), '-m', 'no_such_module']) == 1
