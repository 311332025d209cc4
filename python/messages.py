"""
Localized message catalogs for user-facing output.

Messages are looked up by dotted id and formatted with str.format. Unknown
languages fall back to English; unknown ids fall back to the id itself.
"""

import logging
import os
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "backup.title": "Backing up configuration",
        "backup.steps.skills": "Custom skills",
        "backup.steps.cache": "Plugin cache",
        "backup.warnings.not_found": "{item} not found, skipping",
        "backup.messages.skills_count": "Copied {count} skill files",
        "restore.title": "Restoring configuration",
        "restore.messages.skills_count": "Restored {count} skill files",
        "cache.backup.title": "Backing up plugin cache",
        "cache.backup.detected": "Detected plugins:",
        "cache.backup.packing": "Packing plugin cache...",
        "cache.backup.done": "Archived {files} files ({size}) to {path}",
        "cache.backup.verify_failed": "Archive integrity check failed: {path}",
        "cache.backup.low_space": "Low disk space: only {free} free at {path}",
        "cache.restore.title": "Restoring plugin cache",
        "cache.restore.info": "Backup file:",
        "cache.restore.file": "  File: {path}",
        "cache.restore.size": "  Size: {size}",
        "cache.restore.extracting": "Extracting...",
        "cache.restore.done": "Restored {files} files and {dirs} directories",
        "cache.clean.title": "Cleaning plugin cache backups",
        "cache.clean.files": "Files to delete:",
        "cache.clean.empty": "No backup files found",
        "cache.clean.total": "Total: {size}",
        "cache.clean.done": "Deleted {deleted} of {count} files",
        "list.item": "  • {name} ({size})",
        "info.title": "Backup artifacts in {path}",
        "info.details": "    {files} files, {size} uncompressed, {status}",
        "info.valid": "valid",
        "info.invalid": "invalid",
        "verify.ok": "Archive integrity check passed: {path}",
        "verify.failed": "Archive integrity check failed: {path}",
        "common.failed": "Operation failed: {error}",
        "common.cancelled": "Operation cancelled by user",
    },
    "zh": {
        "backup.title": "备份配置",
        "backup.steps.skills": "自定义技能",
        "backup.steps.cache": "插件缓存",
        "backup.warnings.not_found": "未找到{item}，跳过",
        "backup.messages.skills_count": "已复制 {count} 个技能文件",
        "restore.title": "恢复配置",
        "restore.messages.skills_count": "已恢复 {count} 个技能文件",
        "cache.backup.title": "备份插件缓存",
        "cache.backup.detected": "检测到的插件：",
        "cache.backup.packing": "正在打包插件缓存...",
        "cache.backup.done": "已归档 {files} 个文件（{size}）到 {path}",
        "cache.backup.verify_failed": "归档完整性检查失败：{path}",
        "cache.backup.low_space": "磁盘空间不足：{path} 仅剩 {free}",
        "cache.restore.title": "恢复插件缓存",
        "cache.restore.info": "备份文件：",
        "cache.restore.file": "  文件：{path}",
        "cache.restore.size": "  大小：{size}",
        "cache.restore.extracting": "正在解压...",
        "cache.restore.done": "已恢复 {files} 个文件和 {dirs} 个目录",
        "cache.clean.title": "清理插件缓存备份",
        "cache.clean.files": "待删除文件：",
        "cache.clean.empty": "未找到备份文件",
        "cache.clean.total": "总计：{size}",
        "cache.clean.done": "已删除 {deleted}/{count} 个文件",
        "list.item": "  • {name}（{size}）",
        "info.title": "{path} 中的备份文件",
        "info.details": "    {files} 个文件，解压后 {size}，{status}",
        "info.valid": "有效",
        "info.invalid": "无效",
        "verify.ok": "归档完整性检查通过：{path}",
        "verify.failed": "归档完整性检查失败：{path}",
        "common.failed": "操作失败：{error}",
        "common.cancelled": "用户取消了操作",
    },
}


def normalize_lang(lang: str) -> str:
    """Map any zh variant (zh, zh_CN, zh-TW.UTF-8) to 'zh' and everything else to 'en'."""
    normalized = (lang or "").lower().replace("-", "").replace("_", "")
    if normalized.startswith("zh"):
        return "zh"
    return DEFAULT_LANG


def detect_lang_from_env() -> str:
    """Read the language from LANG or LC_ALL."""
    return normalize_lang(os.environ.get("LANG") or os.environ.get("LC_ALL") or "")


def translate(key: str, lang: str = DEFAULT_LANG, **params) -> str:
    """Look up a message id in the catalog for lang and format it."""
    catalog = CATALOGS.get(normalize_lang(lang), CATALOGS[DEFAULT_LANG])
    template = catalog.get(key) or CATALOGS[DEFAULT_LANG].get(key)
    if template is None:
        logger.debug("Missing message id: %s", key)
        return key

    try:
        return template.format(**params)
    except (KeyError, IndexError) as e:
        logger.debug("Missing parameter %s for message %s", e, key)
        return template


class Translator:
    """Binds translate() to one language."""

    def __init__(self, lang: str = DEFAULT_LANG):
        self.lang = normalize_lang(lang)

    def __call__(self, key: str, **params) -> str:
        return translate(key, self.lang, **params)
