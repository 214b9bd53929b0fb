"""
Visual template registry shared by the ATS scorer and the exporters.
"""

from typing import Dict, Optional

DEFAULT_TEMPLATE = 'modern'

TEMPLATES = {
    'modern': {
        'name': 'Modern Professional',
        'description': 'Clean design with accent colors and modern typography',
        'category': 'professional',
        'colors': {'primary': '#2563eb', 'secondary': '#64748b', 'accent': '#0ea5e9'},
    },
    'classic': {
        'name': 'Classic Executive',
        'description': 'Traditional layout perfect for corporate roles',
        'category': 'professional',
        'colors': {'primary': '#1f2937', 'secondary': '#6b7280', 'accent': '#374151'},
    },
    'creative': {
        'name': 'Creative Designer',
        'description': 'Bold design with creative elements for design roles',
        'category': 'creative',
        'colors': {'primary': '#7c3aed', 'secondary': '#a78bfa', 'accent': '#c084fc'},
    },
    'minimal': {
        'name': 'Minimal Clean',
        'description': 'Ultra-clean design focusing on content over decoration',
        'category': 'minimal',
        'colors': {'primary': '#000000', 'secondary': '#666666', 'accent': '#999999'},
    },
}


def resolve_template(template: Optional[str]) -> str:
    """Map an arbitrary template id to a registered one (unknown -> modern)"""
    if isinstance(template, str) and template.lower() in TEMPLATES:
        return template.lower()
    return DEFAULT_TEMPLATE


def template_category(template: Optional[str]) -> str:
    return TEMPLATES[resolve_template(template)]['category']


def template_colors(template: Optional[str], custom_colors=None) -> Dict[str, str]:
    """Template palette, with any valid custom colors layered on top"""
    colors = dict(TEMPLATES[resolve_template(template)]['colors'])
    if isinstance(custom_colors, dict):
        for key in ('primary', 'secondary', 'accent'):
            value = custom_colors.get(key)
            if isinstance(value, str) and _is_hex_color(value):
                colors[key] = value
    return colors


def _is_hex_color(value: str) -> bool:
    digits = value[1:] if value.startswith('#') else ''
    return len(digits) in (3, 6) and all(c in '0123456789abcdefABCDEF' for c in digits)


def list_templates():
    return [
        {'id': template_id, **details}
        for template_id, details in TEMPLATES.items()
    ]
