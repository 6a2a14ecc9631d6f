"""
App layer: HTTP 서버 (FastAPI).

역할:
- 템플릿 CRUD API, 렌더 API
- 요청 body 검증
- ⚠️ 렌더 로직 없음 (src/render에 위임)

주의: 폴더 구분
- src/templates/ → 코드 (manager.py)
- templates_data/ (루트) → 데이터 저장소
"""
