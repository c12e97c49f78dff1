from typing import Dict

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATA_GO_KR_API_KEY: str = ""              # 공공데이터포털 (상가업소 정보)
    SEOUL_OPEN_API_KEY: str = ""              # 서울 열린데이터광장 (경로에 포함됨)
    SBIZ_OPEN_API_KEYS: Dict[str, str] = {}   # 소상공인365 OpenAPI: {apiName: certKey}
    NAVER_SEARCH_CLIENT_ID: str = ""          # Naver Developers (장소 검색)
    NAVER_SEARCH_CLIENT_SECRET: str = ""
    UPSTREAM_USER_AGENT: str = "Mozilla/5.0 (compatible; sbiz-proxy/1.0)"
    UPSTREAM_REFERER: str = "https://bigdata.sbiz.or.kr/"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
