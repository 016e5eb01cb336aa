"""
Owner field formatting for the rendered site list.

The owner column is free text that may hold several contact tokens.
Each recognizable token is turned into a link; anything else passes
through unchanged.
"""

import re


HYPERLINK_RE = re.compile(r'<a\s+[^>]*href="([^"]*)"[^>]*>(.*?)</a>')
URL_RE = re.compile(r'^[a-z]+://')
EMAIL_RE = re.compile(r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}')
FEDIVERSE_RE = re.compile(r'^@([^\s@]+)@([^\s@]+\.[^\s@]+)$')
PHONE_RE = re.compile(r'^\+?\d{10,15}$')
SMS_RE = re.compile(r'^sms:\+?\d{10,15}$')


def format_owner_token(part: str) -> str:
    if HYPERLINK_RE.search(part):
        return part
    match = FEDIVERSE_RE.match(part)
    if match:
        username, domain = match.group(1), match.group(2)
        return f'<a href="https://{domain}/@{username}">{part}</a>'
    if PHONE_RE.match(part):
        return f'<a href="tel:{part}">{part}</a>'
    if SMS_RE.match(part):
        return f'<a href="{part}">{part}</a>'
    if URL_RE.match(part):
        return f'<a href="{part}" target="_blank">{part}</a>'
    if EMAIL_RE.search(part):
        return f'<a href="mailto:{part}">{part}</a>'
    return part


def format_owner(owner: str) -> str:
    """Linkify contact tokens (fediverse, phone, sms, URL, e-mail) in an owner string."""
    return ' '.join(format_owner_token(part) for part in owner.split())
