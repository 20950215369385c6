from portfolio_site import page as dom
from portfolio_site.page import PageDocument


def test_mount_replaces_children(page):
    container = page.mount("project-grid", ["<div class='card'>a</div>", "<div class='card'>b</div>"])
    assert container is not None
    assert [c.text for c in container.find_all(recursive=False)] == ["a", "b"]

    page.mount("project-grid", ["<div class='card'>c</div>"])
    assert len(page.by_id("project-grid").find_all(recursive=False)) == 1


def test_mount_swaps_wrong_tag_and_keeps_id(page):
    assert page.by_id("experience-list").name == "div"
    container = page.mount("experience-list", "<li>x</li>", tag="ol", class_name="timeline-list")
    assert container.name == "ol"
    assert page.by_id("experience-list") is container
    assert container["class"] == ["timeline-list"]
    assert container.li.text == "x"


def test_mount_keeps_tag_that_already_fits(page):
    original = page.by_id("education-list")
    assert page.mount("education-list", "<li>x</li>", tag="ol") is original


def test_mount_missing_container_is_a_noop(page, caplog):
    before = page.render()
    assert page.mount("no-such-id", "<li>x</li>") is None
    assert page.render() == before
    assert "no-such-id" in caplog.text


def test_first_by_id_picks_first_present():
    page = PageDocument("<html><body><div id='bento-grid'></div></body></html>")
    assert page.first_by_id(dom.GRID_IDS)["id"] == "bento-grid"


def test_class_helpers():
    page = PageDocument("<html><body><p id='x' class='a'>t</p></body></html>")
    tag = page.by_id("x")
    dom.add_class(tag, "b")
    dom.add_class(tag, "b")
    assert dom.classes(tag) == ["a", "b"]
    assert dom.toggle_class(tag, "a") is False
    dom.remove_class(tag, "b")
    assert not tag.has_attr("class")
    assert dom.toggle_class(tag, "a") is True


def test_style_helpers(page):
    body = page.body
    dom.set_style(body, "overflow", "hidden")
    assert dom.get_style(body, "overflow") == "hidden"
    dom.set_style(body, "overflow", None)
    assert not body.has_attr("style")


def test_inner_html_round_trip(page):
    target = page.select_one("[data-modal-text]")
    dom.set_inner_html(target, "<p>Hi <em>there</em></p>")
    assert dom.inner_html(target) == "<p>Hi <em>there</em></p>"
