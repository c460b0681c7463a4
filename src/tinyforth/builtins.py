## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .loader import get_forth_name
from .dictionary import Dictionary


# Words handled by the compiler itself rather than looked up in the dictionary.
CONTROL_WORDS = ('IF', 'ELSE', 'THEN', 'DO', 'LOOP', 'I', 'J', 'RECURSE')


def load_builtins_dictionary():
    dictionary = Dictionary()

    # Primitives (wrapped via Dictionary helper)
    for k in dir(operators):
        if not k.startswith('op_'): continue
        dictionary.add_primitive(get_forth_name(k), getattr(operators, k))

    return dictionary
