from carve.links import link_href, opens_new_tab, split_links
from carve.model import LinkType, ProfileLink, sort_links


def _link(type_: str, url: str, order: int = 0) -> ProfileLink:
    return ProfileLink(type=LinkType.parse(type_), url=url, order=order, raw_type=type_)


def test_href_email_adds_mailto():
    assert link_href(_link("email", "a@b.com")) == "mailto:a@b.com"
    assert link_href(_link("email", "mailto:a@b.com")) == "mailto:a@b.com"


def test_href_phone_adds_tel():
    assert link_href(_link("phone", "+15551234567")) == "tel:+15551234567"


def test_href_whatsapp_builds_wa_me():
    assert link_href(_link("whatsapp", "+1 (555) 123-4567")) == "https://wa.me/15551234567"
    assert link_href(_link("whatsapp", "https://wa.me/1555")) == "https://wa.me/1555"


def test_href_other_gets_scheme():
    assert link_href(_link("website", "jane.dev")) == "https://jane.dev"
    assert link_href(_link("custom", "/book/jane")) == "/book/jane"
    assert link_href(_link("github", "http://github.com/jane")) == "http://github.com/jane"


def test_split_links_keeps_order():
    links = [
        _link("email", "a@b.com"),
        _link("github", "https://github.com/jane"),
        _link("website", "https://jane.dev"),
        _link("linkedin", "https://linkedin.com/in/jane"),
    ]
    social, action = split_links(links)
    assert [l.raw_type for l in social] == ["github", "linkedin"]
    assert [l.raw_type for l in action] == ["email", "website"]


def test_split_links_raw_type_exact():
    social, action = split_links([_link("GitHub", "https://github.com/jane")])
    assert social == []
    assert [l.raw_type for l in action] == ["GitHub"]


def test_opens_new_tab():
    assert not opens_new_tab(_link("email", "a@b.com"))
    assert not opens_new_tab(_link("custom", "/book/jane"))
    assert opens_new_tab(_link("website", "https://jane.dev"))


def test_sort_links_is_stable():
    a = _link("email", "a", order=2)
    b = _link("email", "b", order=1)
    c = _link("email", "c", order=2)
    assert [l.url for l in sort_links([a, b, c])] == ["b", "a", "c"]
