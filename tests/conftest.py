import pytest
import shapes

from jsonshape import JsonSerializer, TypeRegistry


@pytest.fixture
def registry():
    return TypeRegistry([shapes.Point, shapes.Line])


@pytest.fixture
def full_registry():
    return TypeRegistry(modules=[shapes])


@pytest.fixture
def serializer(registry):
    return JsonSerializer(registry)
