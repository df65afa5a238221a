# SourceKitten structure keys
KEY_NAME = "key.name"
KEY_KIND = "key.kind"
KEY_OFFSET = "key.offset"
KEY_LENGTH = "key.length"
KEY_NAME_OFFSET = "key.nameoffset"
KEY_NAME_LENGTH = "key.namelength"
KEY_BODY_OFFSET = "key.bodyoffset"
KEY_BODY_LENGTH = "key.bodylength"
KEY_DOC_OFFSET = "key.docoffset"
KEY_DOC_LENGTH = "key.doclength"
KEY_TYPE_NAME = "key.typename"
KEY_ACCESSIBILITY = "key.accessibility"
KEY_ATTRIBUTES = "key.attributes"
KEY_ATTRIBUTE = "key.attribute"
KEY_INHERITED_TYPES = "key.inheritedtypes"
KEY_SUBSTRUCTURE = "key.substructure"

# SourceKitten declaration kinds
KIND_PROTOCOL = "source.lang.swift.decl.protocol"
KIND_CLASS = "source.lang.swift.decl.class"
KIND_METHOD_INSTANCE = "source.lang.swift.decl.function.method.instance"
KIND_METHOD_STATIC = "source.lang.swift.decl.function.method.static"
KIND_METHOD_CLASS = "source.lang.swift.decl.function.method.class"
KIND_SUBSCRIPT = "source.lang.swift.decl.function.subscript"
KIND_VAR_INSTANCE = "source.lang.swift.decl.var.instance"
KIND_VAR_STATIC = "source.lang.swift.decl.var.static"
KIND_VAR_CLASS = "source.lang.swift.decl.var.class"
KIND_VAR_PARAMETER = "source.lang.swift.decl.var.parameter"
KIND_GENERIC_TYPE_PARAM = "source.lang.swift.decl.generic_type_param"

ACCESSIBILITY_PREFIX = "source.lang.swift.accessibility."
ATTRIBUTE_AVAILABLE = "source.decl.attribute.available"

# Swift keywords the generator reads from or writes into source text
INIT_PREFIX = "init"
SUBSCRIPT_NAME = "subscript"
THROWS = "throws"
RETHROWS = "rethrows"
ASYNC = "async"
REQUIRED = "required"
DONE_INIT = "_doneInit"
CALL_COUNT_SUFFIX = "CallCount"
SET_CALL_COUNT_SUFFIX = "SetCallCount"
HANDLER_SUFFIX = "Handler"
UNDERLYING_PREFIX = "underlying"
MOCK_SUFFIX = "Mock"
DEFAULT_ANNOTATION = "@mockable"
AVAILABLE_ATTRIBUTE = "@available"

# Access levels that survive into the generated mock
PUBLIC_ACCESS_LEVELS = ("public", "open")
