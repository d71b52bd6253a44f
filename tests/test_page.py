"""Tests for the page description."""

from __future__ import annotations

from playerhub.page import Element, PageContext


class TestElement:
    def test_identity_is_id_only(self):
        assert Element("a", {"class": "x"}) == Element("a")
        assert Element("a") != Element("b")


class TestPageContext:
    def test_script_dir(self):
        page = PageContext(script_url="https://cdn.example.com/libs/player.js")
        assert page.script_dir == "https://cdn.example.com/libs/"

    def test_script_dir_without_url(self):
        assert PageContext().script_dir is None

    def test_script_dir_without_slash(self):
        assert PageContext(script_url="player.js").script_dir is None

    def test_open_document_accepts_any_id(self):
        assert PageContext().get_element_by_id("x") == Element("x")

    def test_closed_document(self):
        known = Element("known", {"width": 640})
        page = PageContext(elements={"known": known})
        assert page.get_element_by_id("known") is known
        assert page.get_element_by_id("other") is None
