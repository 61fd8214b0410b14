import pytest

from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors


@pytest.mark.parametrize(
    "url",
    [
        "https://poe.com/login",
        "https://poe.com/login?redirect_url=%2F",
        "https://www.poe.com/login",
        "http://poe.com/login/email",
    ],
)
def test_login_pages_of_the_service(url):
    assert DEFAULT_SELECTORS.is_login_location(url, "https://poe.com")


@pytest.mark.parametrize(
    "url",
    [
        "https://poe.com/",
        "https://poe.com/Assistant",
        "https://example.com/login",
        "about:blank",
        "",
    ],
)
def test_other_locations_are_not_login(url):
    assert not DEFAULT_SELECTORS.is_login_location(url, "https://poe.com")


def test_login_check_follows_base_url():
    assert DEFAULT_SELECTORS.is_login_location("https://chat.example.org/login", "https://chat.example.org/")
    assert not DEFAULT_SELECTORS.is_login_location("https://poe.com/login", "https://chat.example.org/")


def test_custom_login_path():
    selectors = ChatSelectors(login_path="/auth/sign-in")

    assert selectors.is_login_location("https://poe.com/auth/sign-in?next=/", "https://poe.com")
    assert not selectors.is_login_location("https://poe.com/login", "https://poe.com")
