"""Crisp Bug Reporter: files GitHub issues from Crisp support conversations."""
