"""Renderers for the event stream.

- html: HtmlCompiler and compile_html, the CommonMark HTML output
"""

from huellas.renderers.html import HtmlCompiler, compile_html

__all__ = ["HtmlCompiler", "compile_html"]
