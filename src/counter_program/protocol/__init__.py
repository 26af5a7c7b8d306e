"""Protocol layer: instruction tags, decoding, and builders."""

from .instruction import Command, Decrement, Increment, Set, Tag, decode, encode
