from __future__ import annotations
from typing import Dict, List, Tuple

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Movie
from ..repositories import movies as movie_repo


class ContentRecommender:
    def __init__(self):
        # TF-IDF 벡터라이저 설정
        # - stop_words='english' : 영어 불용어 제거
        # - ngram_range=(1,2)     : 유니그램+바이그램까지 고려
        self.vectorizer = TfidfVectorizer(
            stop_words='english',
            max_features=20000,
            ngram_range=(1, 2)
        )
        self.movie_ids: List[str] = []  # 인덱스↔movie_id 매핑
        self.tfidf_matrix = None

    def _build_corpus_row(self, m: Movie) -> str:
        # 제목 + 장르 + 태그 + 줄거리를 한 문서로 이어붙임
        fields = [
            m.movie_title or "",
            " ".join(m.movie_genre or []),
            " ".join(m.tags or []),
            m.synopsis or "",
        ]
        return " ".join(fields)

    def fit(self, movies: List[Movie]):
        self.movie_ids = [m.movie_id for m in movies]
        corpus = [self._build_corpus_row(m) for m in movies]
        if not any(doc.strip() for doc in corpus):
            self.tfidf_matrix = None
            return
        try:
            self.tfidf_matrix = self.vectorizer.fit_transform(corpus)
        except ValueError:
            # 불용어만 있는 코퍼스 등: 어휘가 비면 유사도 계산 불가
            self.tfidf_matrix = None

    def similar_to(self, movie_id: str) -> Dict[str, float]:
        """seed 영화와 나머지 영화들의 코사인 유사도. seed 자신은 제외."""
        if self.tfidf_matrix is None or movie_id not in self.movie_ids:
            return {}
        idx = self.movie_ids.index(movie_id)
        sims = cosine_similarity(self.tfidf_matrix, self.tfidf_matrix[idx]).ravel()
        result = {mid: float(sims[i]) for i, mid in enumerate(self.movie_ids)}
        result.pop(movie_id, None)
        return result


def recommend_similar(db: Session, movie_id: str, limit: int = 12) -> List[Tuple[Movie, float]]:
    """
    seed 영화와 비슷한 영화 추천.
    점수 = 0.9 * 콘텐츠 유사도 + 0.1 * 큐레이션(recommend) 여부
    """
    seed = movie_repo.get_movie(db, movie_id)
    if seed is None:
        raise NotFoundError("Movie not found")

    # 코퍼스는 seed 를 포함한 전체 영화
    movies = movie_repo.all_movies(db)
    rec = ContentRecommender()
    rec.fit(movies)
    score_map = rec.similar_to(movie_id)

    by_id = {m.movie_id: m for m in movies}
    candidates = [mid for mid in by_id if mid != movie_id]
    sims = np.array([score_map.get(mid, 0.0) for mid in candidates])
    boost = np.array([1.0 if by_id[mid].recommend else 0.0 for mid in candidates])
    blended = sims * 0.9 + boost * 0.1

    order = np.argsort(-blended, kind="stable")[:limit]
    return [(by_id[candidates[i]], float(blended[i])) for i in order]


def curated(db: Session, limit: int = 12) -> List[Movie]:
    return movie_repo.list_recommended(db)[:limit]
