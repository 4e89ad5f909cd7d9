"""
Search runner for Marks.

Dispatches one searcher per discovered document to a thread pool, collects
the per-file result lists and sorts them once, centrally, by score.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from ..errors import FileAccessError
from ..models.config import MarksConfig
from ..models.filters import FilterCriteria
from ..models.query import Query
from ..models.search_results import SearchResult, SearchResults
from .fs_walker import DocumentFile, FSWalker
from .fuzzy import FuzzyScorer, Scorer
from .searcher import search_file


logger = logging.getLogger(__name__)


class SearchRunner:
    """
    Runs a query over every document below a path.

    The query, criteria, config and scorer are only read by the workers, so a
    single instance of each is shared by all file scans.
    """

    def __init__(
        self,
        query: Query,
        criteria: Optional[FilterCriteria] = None,
        config: Optional[MarksConfig] = None,
        scorer: Optional[Scorer] = None,
    ):
        """
        Initialize the search runner.

        Args:
            query: Parsed query
            criteria: Structural filters
            config: Application configuration
            scorer: Fuzzy scorer, defaults to FuzzyScorer with the configured cutoff
        """
        self.query = query
        self.criteria = criteria or FilterCriteria()
        self.config = config or MarksConfig()
        self.scorer = scorer or FuzzyScorer(self.config.search.fuzzy_score_cutoff)
        self.walker = FSWalker(self.config.discovery, self.config.limits)

    def run(self, path: str) -> SearchResults:
        """
        Search every document below a path.

        Args:
            path: Directory or single file to search

        Returns:
            SearchResults sorted by descending score. Unreadable files are
            listed in `errors` and contribute no results.
        """
        start_time = time.time()
        documents = list(self.walker.discover(path))
        logger.info(f"Searching {len(documents)} documents with {self.query}")

        results = SearchResults(query=self.query.full, total_scanned=len(documents))

        with ThreadPoolExecutor(max_workers=self.config.limits.max_concurrent) as executor:
            futures = {
                executor.submit(self.search_document, document): index
                for index, document in enumerate(documents)
            }
            per_file: List[Optional[List[SearchResult]]] = [None] * len(documents)

            for future in as_completed(futures):
                index = futures[future]
                try:
                    per_file[index] = future.result()
                except FileAccessError as e:
                    logger.warning(e.message)
                    results.add_error(e.message)

        # Concatenate in discovery order so equal scores keep a stable order
        for file_results in per_file:
            if file_results:
                results.extend(file_results)

        results.sort_by_score()
        results.execution_time = time.time() - start_time
        logger.info(str(results))
        return results

    def search_document(self, document: DocumentFile) -> List[SearchResult]:
        """
        Search one document.

        Raises:
            FileAccessError: If the document cannot be read
        """
        return search_file(
            document.path,
            self.query,
            self.criteria,
            document.doc_type,
            self.scorer,
            self.config.search
        )
