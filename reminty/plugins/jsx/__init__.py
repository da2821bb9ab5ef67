"""React/JSX component plugin."""

from reminty.plugins.jsx.plugin import JSXPlugin

__all__ = ['JSXPlugin']
