"""
snbtkit core: lexer, grammar engine, tag model and errors.

Usage:
    from snbtkit.core.parser import parse

    tag = parse('{id: "minecraft:stone", Count: 1b}')
"""
