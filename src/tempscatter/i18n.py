"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "일교차 산점도",
        "en": "Daily Temperature Extremes",
    },
    "axis_tempmin": {
        "ko": "최저 기온 °C",
        "en": "Minimum Temperature °C",
    },
    "axis_tempmax": {
        "ko": "최고 기온 °C",
        "en": "Maximum Temperature °C",
    },
    "tooltip_tempmin": {
        "ko": "최저",
        "en": "Min",
    },
    "tooltip_tempmax": {
        "ko": "최고",
        "en": "Max",
    },
    "legend_title": {
        "ko": "날짜",
        "en": "Day of year",
    },
    "label_source": {
        "ko": "데이터 경로 또는 URL",
        "en": "CSV path or URL",
    },
    "label_upload": {
        "ko": "CSV 업로드",
        "en": "Upload CSV",
    },
    "label_date_format": {
        "ko": "날짜 형식",
        "en": "Date format",
    },
    "label_histograms": {
        "ko": "주변 히스토그램",
        "en": "Marginal histograms",
    },
    "btn_render": {
        "ko": "✦ 그리기",
        "en": "✦ Plot",
    },
    "placeholder": {
        "ko": "CSV 파일을 불러와 산점도를 그려보세요",
        "en": "Load a CSV file to draw the scatter plot",
    },
    "loading": {
        "ko": "그리는 중",
        "en": "Plotting",
    },
    "error_load": {
        "ko": "데이터를 불러올 수 없어요: {error}",
        "en": "Could not load the data: {error}",
    },
    "error_empty": {
        "ko": "표시할 행이 없어요. 날짜 형식을 확인해 주세요.",
        "en": "No rows to show. Check the date format.",
    },
}


def t(key: str, lang: str = "en") -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
