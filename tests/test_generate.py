import logging
import sys

import shapes
from shapes import Account, Event, Line, Person, Point, Polygon, Settings, Tagged

from jsonshape import TypeRegistry
from jsonshape.generate import annotation_source, generate, main


def load(source):
    ns = {}
    exec(compile(source, '<generated>', 'exec'), ns)
    return ns


def test_generate():
    types = [Point, Line, Polygon, Account, Person, Event, Tagged, Settings]
    source = generate(types)

    assert 'import shapes\n' in source
    assert 'import jsonshape.primitives\n' in source
    assert "name='shapes.Line'," in source

    registry = load(source)['REGISTRY']
    assert registry.descriptors() == TypeRegistry(types).descriptors()


def test_generate_imports():
    source = generate([Point], imports=['from decimal import Decimal'])
    assert 'from decimal import Decimal\n' in source
    assert 'Decimal' in load(source)


def test_generate_skips_local_classes(caplog):
    class Local:
        Name: str = ''

    with caplog.at_level(logging.WARNING):
        source = generate([Local, Point])

    assert 'skipping' in caplog.text
    assert len(load(source)['REGISTRY']) == 1


def test_annotation_source():
    modules = set()
    assert annotation_source(int, modules) == 'int'
    assert annotation_source(list[Point], modules) == 'list[shapes.Point]'
    assert annotation_source(Point | None, modules) == 'typing.Union[shapes.Point, None]'
    assert annotation_source(tuple[int, ...], modules) == 'tuple[int, ...]'
    assert annotation_source('Missing', modules) == "'Missing'"
    assert modules == {'builtins', 'shapes'}


def test_main(tmp_path, monkeypatch):
    path = tmp_path / 'registry.py'
    monkeypatch.setattr(sys, 'argv', ['jsonshape-generate', '-m', 'shapes', '-o', str(path)])
    main()

    registry = load(path.read_text())['REGISTRY']
    assert registry.descriptors() == TypeRegistry(modules=[shapes]).descriptors()
