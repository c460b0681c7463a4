## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class ForthError(Exception):
    code: str = "error"

    def __init__(self, message: str = "", *, forth_token=None, forth_meta=None):
        """Base class for all Forth-raised errors, all of them fatal to the current run."""
        super().__init__(message)
        self.forth_token: str = forth_token
        self.forth_meta: dict = forth_meta

class ForthParseError(ForthError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, forth_token=token, forth_meta={'filename': filename, 'line': line, 'column': column})
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class ForthUnclosedComment(ForthParseError):
    code = "unclosed-comment"

class ForthUnclosedString(ForthParseError):
    code = "unclosed-string"


class ForthStackUnderflow(ForthError, IndexError):
    code = "stack-underflow"

class ForthStackOverflow(ForthError, OverflowError):
    code = "stack-overflow"

class ForthReturnStackOverflow(ForthError, RecursionError):
    code = "return-stack-overflow"

class ForthDivisionByZero(ForthError, ZeroDivisionError):
    code = "division-by-zero"

class ForthInvalidAddress(ForthError, IndexError):
    code = "invalid-address"

class ForthUnknownWord(ForthError, NameError):
    code = "?"


class ForthCompileError(ForthError, ValueError):
    """Problems found while reading or compiling a definition, before anything executes."""
    pass

class ForthMalformedDefinition(ForthCompileError):
    code = "invalid-word"

class ForthUnterminatedDefinition(ForthCompileError):
    code = "unterminated-definition"

class ForthNestedDefinition(ForthCompileError):
    code = "nested-definition"

class ForthMisplacedControlWord(ForthCompileError):
    code = "compile-only-word"

class ForthMalformedControlStructure(ForthCompileError):
    code = "malformed-control-structure"
