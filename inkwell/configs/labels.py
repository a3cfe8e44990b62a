"""Localized labels emitted by the blog core.

Only the handful of messages returned to console clients and the page type
labels stamped on cached pages live here.
"""

from enum import StrEnum

from inkwell.configs.settings import settings

LANGS: dict[str, dict[str, str]] = {
    "en_US": {
        "articleLabel": "Article",
        "pageLabel": "Page",
        "tagArticlesLabel": "Tag Articles",
        "dateArticlesLabel": "Archive Articles",
        "indexArticleLabel": "Index",
        "addSuccLabel": "Added successfully",
        "updateSuccLabel": "Updated successfully",
        "removeSuccLabel": "Removed successfully",
        "updateFailLabel": "Update failed",
        "removeFailLabel": "Remove failed",
        "getFailLabel": "Get failed",
        "duplicatedEmailLabel": "Duplicated email",
        "loginFailLabel": "Wrong email or password",
        "notFoundLabel": "Not found",
        "commentSuccLabel": "Comment added",
    },
    "zh_CN": {
        "articleLabel": "文章",
        "pageLabel": "自定义页面",
        "tagArticlesLabel": "标签文章",
        "dateArticlesLabel": "归档文章",
        "indexArticleLabel": "首页",
        "addSuccLabel": "添加成功",
        "updateSuccLabel": "更新成功",
        "removeSuccLabel": "删除成功",
        "updateFailLabel": "更新失败",
        "removeFailLabel": "删除失败",
        "getFailLabel": "获取失败",
        "duplicatedEmailLabel": "邮件地址重复",
        "loginFailLabel": "用户名或密码错误",
        "notFoundLabel": "未找到",
        "commentSuccLabel": "评论成功",
    },
}

DEFAULT_LOCALE = "en_US"


def get_label(key: str, locale: str | None = None) -> str:
    """
    Get a localized label.

    Falls back to the default locale, then to the key itself.

    Args:
        key: Label key, e.g. ``"duplicatedEmailLabel"``
        locale: Locale name; defaults to the configured ``LOCALE``

    Returns:
        str: Localized label
    """
    langs = LANGS.get(locale or settings.LOCALE) or LANGS[DEFAULT_LOCALE]
    return langs.get(key) or LANGS[DEFAULT_LOCALE].get(key, key)


class PageType(StrEnum):
    """Page types tracked by the page cache, valued by their label key."""

    ARTICLE = "articleLabel"
    PAGE = "pageLabel"
    TAG_ARTICLES = "tagArticlesLabel"
    DATE_ARTICLES = "dateArticlesLabel"
    INDEX = "indexArticleLabel"

    @property
    def label(self) -> str:
        """Localized label for this page type."""
        return get_label(self.value)
