"""Galalith protocol code generator."""

from .analysis import direct_sub_protocol_ids as direct_sub_protocol_ids
from .analysis import sub_protocol_ids as sub_protocol_ids
from .cpp import CppGenerator as CppGenerator
from .emitter import GeneratedFile as GeneratedFile
from .emitter import GenerationContext as GenerationContext
from .emitter import Generator as Generator
from .errors import *
from .naming import TypeNameDialect as TypeNameDialect
from .naming import translate as translate
from .parser import load_registry as load_registry
from .parser import load_registry_file as load_registry_file
from .parser import parse_type_name as parse_type_name
from .targets import generator_for as generator_for
from .types import *
from .typescript import TypeScriptGenerator as TypeScriptGenerator
