"""ナレッジベースサービス。"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superops.pager import CursorPaginator
from superops.services._base import BaseService, Entity, connection_query, entity_document, prepare_input
from superops.types import Page

KB_ARTICLE_FRAGMENT = """
fragment KbArticleFields on KbArticle {
  id
  title
  content
  status
  visibility
  slug
  excerpt
  collectionId
  publishedAt
  viewCount
  helpfulCount
  notHelpfulCount
  tags
  relatedArticleIds
  createdAt
  updatedAt
  collection {
    id
    name
  }
  author {
    id
    name
  }
  attachments {
    id
    name
    url
    size
    mimeType
  }
}
"""

KB_COLLECTION_FRAGMENT = """
fragment KbCollectionFields on KbCollection {
  id
  name
  description
  slug
  parentId
  articleCount
  createdAt
  updatedAt
  parent {
    id
    name
  }
}
"""

_ARTICLE = {"fragment": KB_ARTICLE_FRAGMENT, "fragment_name": "KbArticleFields"}
_COLLECTION = {"fragment": KB_COLLECTION_FRAGMENT, "fragment_name": "KbCollectionFields"}

GET_KB_ARTICLE = entity_document("query GetKbArticle($id: ID!)", "getKbArticle(id: $id)", **_ARTICLE)

GET_KB_COLLECTION = f"""{KB_COLLECTION_FRAGMENT}
query GetKbCollection($id: ID!) {{
  getKbCollection(id: $id) {{
    ...KbCollectionFields
    children {{
      id
      name
      description
      articleCount
    }}
  }}
}}
"""

SEARCH_KNOWLEDGE_BASE = f"""{KB_ARTICLE_FRAGMENT}
query SearchKnowledgeBase($query: String!, $first: Int, $after: String, $orderBy: KbArticleOrderInput) {{
  searchKnowledgeBase(query: $query, first: $first, after: $after, orderBy: $orderBy) {{
    edges {{
      node {{
        article {{
          ...KbArticleFields
        }}
        score
        highlights {{
          title
          content
        }}
      }}
      cursor
    }}
    pageInfo {{
      hasNextPage
      hasPreviousPage
      startCursor
      endCursor
    }}
    totalCount
  }}
}}
"""

LIST_KB_ARTICLES = connection_query(
    "query GetKbArticleList($first: Int, $after: String, $filter: KbArticleFilterInput, "
    "$orderBy: KbArticleOrderInput)",
    "getKbArticleList(first: $first, after: $after, filter: $filter, orderBy: $orderBy)",
    **_ARTICLE,
)

CREATE_KB_COLLECTION = entity_document(
    "mutation CreateKbCollection($input: KbCollectionInput!)",
    "createKbCollection(input: $input)",
    **_COLLECTION,
)

UPDATE_KB_COLLECTION = entity_document(
    "mutation UpdateKbCollection($id: ID!, $input: KbCollectionInput!)",
    "updateKbCollection(id: $id, input: $input)",
    **_COLLECTION,
)

CREATE_KB_ARTICLE = entity_document(
    "mutation CreateKbArticle($input: KbArticleInput!)",
    "createKbArticle(input: $input)",
    **_ARTICLE,
)

UPDATE_KB_ARTICLE = entity_document(
    "mutation UpdateKbArticle($id: ID!, $input: KbArticleInput!)",
    "updateKbArticle(id: $id, input: $input)",
    **_ARTICLE,
)

PUBLISH_KB_ARTICLE = entity_document(
    "mutation PublishKbArticle($id: ID!)", "publishKbArticle(id: $id)", **_ARTICLE
)


class KnowledgeBaseService(BaseService):
    """ナレッジベースの記事とコレクション。"""

    async def get_article(self, id: str) -> Entity:
        return await self._fetch(GET_KB_ARTICLE, {"id": id}, "getKbArticle")

    async def get_collection(self, id: str) -> Entity:
        """コレクションを子コレクションつきで取得する。"""

        return await self._fetch(GET_KB_COLLECTION, {"id": id}, "getKbCollection")

    async def search(
        self,
        query: str,
        *,
        first: int = 50,
        after: str | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        """全文検索する。

        各要素は ``article``・``score``・``highlights`` を持つ。

        Args:
            query: 検索文字列。
            first: 取得件数（上限100）。
            after: このカーソルより後ろを取得する。
            order_by: 並び順。

        Returns:
            検索結果のページ。
        """

        variables = self._page_variables(first=first, after=after, order_by=order_by, query=query)
        return await self._fetch_page(SEARCH_KNOWLEDGE_BASE, variables, "searchKnowledgeBase")

    async def list_articles(
        self,
        *,
        first: int = 50,
        after: str | None = None,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
    ) -> Page[Entity]:
        variables = self._page_variables(first=first, after=after, filter=filter, order_by=order_by)
        return await self._fetch_page(LIST_KB_ARTICLES, variables, "getKbArticleList")

    def list_articles_all(
        self,
        *,
        filter: Mapping[str, Any] | None = None,
        order_by: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        max_items: int | None = None,
    ) -> CursorPaginator[Entity]:
        """全記事を順に返すイテレータを作る。"""

        return self._iterate(
            self.list_articles,
            filter=filter,
            order_by=order_by,
            page_size=page_size,
            max_items=max_items,
        )

    async def create_collection(self, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            CREATE_KB_COLLECTION,
            {"input": prepare_input(input)},
            "createKbCollection",
        )

    async def update_collection(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_KB_COLLECTION,
            {"id": id, "input": prepare_input(input)},
            "updateKbCollection",
        )

    async def create_article(self, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(CREATE_KB_ARTICLE, {"input": prepare_input(input)}, "createKbArticle")

    async def update_article(self, id: str, input: Mapping[str, Any]) -> Entity:
        return await self._mutate(
            UPDATE_KB_ARTICLE,
            {"id": id, "input": prepare_input(input)},
            "updateKbArticle",
        )

    async def publish_article(self, id: str) -> Entity:
        """記事を公開状態にする。"""

        return await self._mutate(PUBLISH_KB_ARTICLE, {"id": id}, "publishKbArticle")
