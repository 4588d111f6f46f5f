"""Wiki link resolution to Confluence page URLs.

``[[target#heading^block|alias]]`` tokens are resolved per distinct target:
first via the page id stored in the linked note's frontmatter, then via a
title search in the configured space. Unresolvable links are left as is.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from obsidian_confluence.confluence_client.api_wrapper import APIWrapper
from obsidian_confluence.confluence_client.page_locator import PageLocator
from obsidian_confluence.models.link_occurrence import LinkOccurrence
from obsidian_confluence.models.settings import SyncSettings
from obsidian_confluence.vault.frontmatter_accessor import FrontmatterAccessor
from obsidian_confluence.vault.local_vault import LocalVault
from obsidian_confluence.vault.models import VaultFile

from .code_fences import iter_unfenced_lines

logger = logging.getLogger(__name__)

# Max concurrent target lookups
MAX_WORKERS = 10

WIKI_LINK_PATTERN = re.compile(r'\[\[([^\[\]]+)\]\]')


def base_target_of(target: str) -> str:
    """Strip ``#heading`` and ``^block`` suffixes from a link target."""
    return re.split(r'[#^]', target, maxsplit=1)[0].strip()


def find_wiki_links(text: str) -> List[LinkOccurrence]:
    """Find wiki links outside fenced code, in text order.

    Embeds (``![[...]]``) and links without a base target (``[[#Heading]]``)
    are not reported.
    """
    occurrences = []
    for offset, line in iter_unfenced_lines(text):
        for match in WIKI_LINK_PATTERN.finditer(line):
            if match.start() > 0 and line[match.start() - 1] == '!':
                continue
            parts = match.group(1).split('|')
            target = parts[0].strip()
            alias = parts[1] if len(parts) > 1 else ''
            base_target = base_target_of(target)
            if not base_target:
                continue
            occurrences.append(LinkOccurrence(
                start=offset + match.start(),
                end=offset + match.end(),
                raw=match.group(0),
                target=target,
                label=alias.strip() or target,
                base_target=base_target,
            ))
    return occurrences


class WikiLinkResolver:
    """Rewrites wiki links of a note into Markdown links to Confluence pages.

    Lookups for distinct targets run concurrently; substitution happens in a
    single pass once every lookup has finished.
    """

    def __init__(
        self,
        vault: LocalVault,
        api: APIWrapper,
        locator: PageLocator,
        settings: SyncSettings,
        max_workers: int = MAX_WORKERS
    ):
        self.vault = vault
        self.api = api
        self.locator = locator
        self.settings = settings
        self.max_workers = max_workers
        self.page_ids = FrontmatterAccessor(
            vault,
            settings.page_id_frontmatter_key,
            settings.legacy_page_id_frontmatter_keys,
        )

    def resolve_target(self, base_target: str, source_file: VaultFile) -> Optional[str]:
        """Page URL for a link target, or None if it cannot be resolved.

        Order: linked note's stored page id, then a title search using the
        note's display title (or the raw target when no note exists).

        Raises:
            ConfluenceError: If the title search fails remotely
        """
        file = self.vault.get_first_linkpath_dest(base_target, source_file.path)
        if file is not None:
            page_id = self.page_ids.get(file)
            if page_id:
                logger.debug(f"Link '{base_target}' -> stored page id {page_id}")
                return self.api.get_page_url(page_id)

        title = self.vault.display_title(file) if file is not None else base_target
        page = self.locator.find_by_title(self.settings.space_key, title)
        if page is not None:
            logger.debug(f"Link '{base_target}' -> page '{title}' ({page.page_id})")
            return self.api.get_page_url(page.page_id)

        logger.info(f"Could not resolve wiki link '{base_target}', leaving it unchanged")
        return None

    def _resolve_all(self, targets: List[str], source_file: VaultFile) -> Dict[str, Optional[str]]:
        urls: Dict[str, Optional[str]] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.resolve_target, target, source_file): target
                for target in targets
            }
            for future in as_completed(futures):
                urls[futures[future]] = future.result()
        return urls

    def resolve_links(self, text: str, source_file: VaultFile) -> str:
        """Replace resolvable wiki links outside fenced code with ``[label](url)``."""
        occurrences = find_wiki_links(text)
        if not occurrences:
            return text

        targets = list(dict.fromkeys(o.base_target for o in occurrences))
        logger.info(f"Resolving {len(targets)} distinct wiki link target(s)")
        urls = self._resolve_all(targets, source_file)

        output = []
        last_index = 0
        for occurrence in occurrences:
            url = urls.get(occurrence.base_target)
            if not url:
                continue
            output.append(text[last_index:occurrence.start])
            output.append(f"[{occurrence.label}]({url})")
            last_index = occurrence.end
        output.append(text[last_index:])
        return ''.join(output)
