import logging


class FieldBase(object):

    def contribute_to_record(self, cls, name):
        self.name = name
        cls._meta.fields[name] = self
        setattr(cls, name, self)


class Meta(object):
    """Class containing metadata about the typed record"""

    def __init__(self):
        self.fields = {}  # attribute name -> declaration, in declaration order

    def __repr__(self):
        return f'<{self.__class__.__name__}({", ".join(self.fields)})>'

    @property
    def active_fields(self):
        '''The declarations that take part in the data flow.'''
        return [_ for _ in self.fields.values() if not _.ignore]


class MetaRecord(type):
    '''Collect the field declarations of a typed record, in the order they
    appear in the class body, so that the class can describe its own schema.'''

    def __new__(cls, names, bases, attrs):
        '''All of this is a big hack, maybe too inspired by how Django does a similar thing!'''
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaRecord)]
        for parent in parents:
            for obj_name, obj in parent._meta.fields.items():
                new_cls._meta.fields[obj_name] = obj

        for obj_name, obj in attrs.items():
            new_cls.add_to_class(obj_name, obj)

        cls.logger = logging.getLogger(__name__)
        cls.logger.debug('typed record %s declares %r' % (names, new_cls._meta))

        return new_cls

    def add_to_class(cls, name, value):
        if hasattr(value, 'contribute_to_record'):
            value.contribute_to_record(cls, name)
        else:
            setattr(cls, name, value)
