from usercss.metadata.block import MetadataBlock, find_metadata_block, strip_metadata_block
from usercss.metadata.directives import Directive, tokenize_directives
from usercss.metadata.extractor import MetadataExtraction, extract_metadata

__all__ = [
    "MetadataBlock",
    "find_metadata_block",
    "strip_metadata_block",
    "Directive",
    "tokenize_directives",
    "MetadataExtraction",
    "extract_metadata",
]
