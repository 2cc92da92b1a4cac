from pytest import fixture

from rpncalc.registry import Registry


@fixture
def registry():
    '''
    Registry, closed afterwards.
    '''
    with Registry() as registry:
        yield registry


@fixture
def handle(registry):
    '''
    Handle of an empty calculator.
    '''
    return registry.new()
