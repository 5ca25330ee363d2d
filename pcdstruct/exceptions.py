class PcdException(Exception):
    '''Base class to extend in order to throw exception in pcdstruct.

    The message is the first argument, everything else is stored as
    attribute so that the caller can inspect what went wrong without
    parsing the string.
    '''

    def __init__(self, msg, **context):
        self.msg = msg
        for key, value in context.items():
            setattr(self, key, value)
        super().__init__(msg)


class PcdIOError(PcdException):
    '''The underlying source or sink failed.'''
    pass


class HeaderError(PcdException):
    '''Malformed, out of order or unsupported header line.'''

    def __init__(self, msg, line=None, expected=None, found=None):
        super().__init__(msg, line=line, expected=expected, found=found)

    def __str__(self):
        if self.line is None:
            return self.msg
        return f'header line {self.line}: {self.msg}'


class UnsupportedVersionError(HeaderError):
    pass


class UnsupportedFormatError(HeaderError):
    pass


class SchemaError(PcdException):
    '''A record or a typed record doesn't agree with the schema of the file.'''

    def __init__(self, msg, field_name=None, expected=None, found=None):
        super().__init__(msg, field_name=field_name, expected=expected, found=found)


class AmbiguousFieldError(SchemaError):
    '''Lookup by name is not possible when the name appears more than once.'''
    pass


class DataError(PcdException):
    '''Malformed token or truncated binary block for a given point.'''

    def __init__(self, msg, point_index=None, field_name=None):
        super().__init__(msg, point_index=point_index, field_name=field_name)

    def __str__(self):
        where = []
        if self.point_index is not None:
            where.append(f'point {self.point_index}')
        if self.field_name is not None:
            where.append(f"field '{self.field_name}'")

        if not where:
            return self.msg

        return f'{", ".join(where)}: {self.msg}'


class CountError(PcdException):
    '''The declared number of points and the actual one disagree.'''

    def __init__(self, msg, expected=None, actual=None):
        super().__init__(msg, expected=expected, actual=actual)


class PointCountError(HeaderError, CountError):
    '''POINTS doesn't match WIDTH * HEIGHT.'''

    def __init__(self, msg, line=None, expected=None, actual=None):
        PcdException.__init__(self, msg, line=line, expected=expected, actual=actual, found=actual)


class WriterStateError(PcdException):
    '''The writer is already finished.'''
    pass


class ConfigurationError(PcdException):
    '''The writer configuration is not usable.'''
    pass
