from cssinliner.stylesheet.parser import parse_stylesheet, split_selector_group
from cssinliner.stylesheet.model import AtRule, Rule, Stylesheet

__all__ = ["parse_stylesheet", "split_selector_group", "Stylesheet", "Rule", "AtRule"]
