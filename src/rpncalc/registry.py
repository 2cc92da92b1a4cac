from threading import Lock
import logging

from .calculator import Calculator
from .util import NotFound, OutOfMemory


logger = logging.getLogger(__name__)


class Registry:
    '''
    Table of independent calculators, by handle.

    Handles are ints handed out in increasing order, and never reused, not
    even after deletion.

    Locking is two-level. The registry lock only ever covers table membership
    and handle allocation; stack work happens afterwards, under the
    calculator's own lock, with the registry lock already released. A
    calculator deleted in between is marked released under its own lock, so
    whoever still holds it gets NotFound rather than a half torn down stack.

    Use as a context manager, or call close() when done, to release every
    remaining calculator.
    '''

    def __init__(self):
        self.table = dict()
        self.next_handle = 0
        self.lock = Lock()
        logger.info('Registry started')

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __len__(self):
        with self.lock:
            return len(self.table)

    def new(self):
        '''
        Create a calculator with an empty stack, and return its handle.
        '''
        with self.lock:
            handle = self.next_handle
            try:
                self.table[handle] = Calculator(handle)
            except MemoryError as e:
                logger.warning('Out of memory creating calculator %d', handle)
                raise OutOfMemory('Cannot allocate calculator') from e
            self.next_handle += 1
        logger.debug('Created calculator %d', handle)
        return handle

    def resolve(self, handle):
        '''
        Return calculator for handle.
        '''
        with self.lock:
            try:
                calculator = self.table.get(handle)
            except TypeError:
                # Unhashable, so certainly not a handle
                calculator = None
        if calculator is None:
            raise NotFound('No calculator with handle {}'.format(handle))
        return calculator

    def delete(self, handle):
        '''
        Delete calculator, and everything on its stack.
        '''
        with self.lock:
            try:
                calculator = self.table.pop(handle, None)
            except TypeError:
                calculator = None
        if calculator is None:
            raise NotFound('No calculator with handle {}'.format(handle))
        calculator.release()
        logger.debug('Deleted calculator %d', handle)

    def close(self):
        '''
        Delete every calculator.

        The registry stays usable afterwards; handles carry on from where they
        were.
        '''
        with self.lock:
            calculators = list(self.table.values())
            self.table.clear()
        for calculator in calculators:
            calculator.release()
        logger.info('Registry closed, released %d calculator(s)',
                    len(calculators))

    def push(self, handle, value):
        '''
        Push value onto the stack of calculator handle.
        '''
        self.resolve(handle).push(value)

    def pop(self, handle):
        '''
        Pop top of the stack of calculator handle.
        '''
        return self.resolve(handle).pop()

    def op(self, handle, symbol):
        '''
        Apply operator symbol on calculator handle, return the result.
        '''
        return self.resolve(handle).apply(symbol)

    def size(self, handle):
        return self.resolve(handle).size()

    def at(self, handle, index):
        return self.resolve(handle).at(index)
