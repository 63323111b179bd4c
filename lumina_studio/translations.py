"""UI strings for the Lumina Studio editor in English and Arabic."""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

LANGUAGES = ('en', 'ar')
DEFAULT_LANGUAGE = 'en'
RTL_LANGUAGES = ('ar',)

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    'appTitle': {'en': 'Lumina Studio', 'ar': 'ستوديو لومينا'},
    'uploadTitle': {'en': 'Upload Photo', 'ar': 'رفع صورة'},
    'uploadDesc': {'en': 'Drag & drop or click to upload', 'ar': 'اسحب وأفلت أو انقر للرفع'},
    'tools': {'en': 'Tools', 'ar': 'الأدوات'},
    'adjust': {'en': 'Adjust', 'ar': 'تعديل'},
    'filters': {'en': 'Filters', 'ar': 'فلاتر'},
    'aiEdit': {'en': 'AI Magic', 'ar': 'سحر الذكاء الاصطناعي'},
    'erase': {'en': 'Magic Eraser', 'ar': 'الممحاة السحرية'},
    'eraseDesc': {'en': 'Describe what to remove.', 'ar': 'صف ما تريد إزالته.'},
    'erasePrompt': {'en': 'Object to remove', 'ar': 'العنصر المراد إزالته'},
    'erasePlaceholder': {'en': 'e.g., "cup", "person on the left"', 'ar': 'مثلاً: "الكوب"، "الشخص على اليسار"'},
    'identify': {'en': 'Identify', 'ar': 'تعرف'},
    'download': {'en': 'Download', 'ar': 'تحميل'},
    'reset': {'en': 'Reset', 'ar': 'إعادة ضبط'},
    'undo': {'en': 'Undo', 'ar': 'تراجع'},
    'redo': {'en': 'Redo', 'ar': 'إعادة'},
    'brightness': {'en': 'Brightness', 'ar': 'السطوع'},
    'contrast': {'en': 'Contrast', 'ar': 'التباين'},
    'saturation': {'en': 'Saturation', 'ar': 'التشبع'},
    'grayscale': {'en': 'B&W', 'ar': 'أبيض وأسود'},
    'sepia': {'en': 'Sepia', 'ar': 'سيبيا'},
    'blur': {'en': 'Blur', 'ar': 'ضبابية'},
    'identifyPrompt': {'en': 'Analyzing image...', 'ar': 'جاري تحليل الصورة...'},
    'identifyResult': {'en': 'Identification Result', 'ar': 'نتيجة التعرف'},
    'noDescription': {'en': 'No description found.', 'ar': 'لم يتم العثور على وصف.'},
    'aiPromptPlaceholder': {
        'en': 'Describe what to change (e.g., "Remove the cup", "Make it look like 1980s")',
        'ar': 'صف ما تريد تغييره (مثلاً: "احذف الكوب"، "اجعلها تبدو كأنها من الثمانينيات")',
    },
    'generate': {'en': 'Generate', 'ar': 'توليد'},
    'processing': {'en': 'Processing...', 'ar': 'جاري المعالجة...'},
    'vintage': {'en': 'Vintage', 'ar': 'عتيق'},
    'movie': {'en': 'Movie Mode', 'ar': 'وضع السينما'},
    'warm': {'en': 'Warm', 'ar': 'دافئ'},
    'cool': {'en': 'Cool', 'ar': 'بارد'},
    'dramatic': {'en': 'Dramatic', 'ar': 'درامي'},
    'original': {'en': 'Original', 'ar': 'أصلي'},
    'back': {'en': 'Back', 'ar': 'رجوع'},
    'editor': {'en': 'Editor', 'ar': 'المحرر'},
    'gallery': {'en': 'Gallery', 'ar': 'المعرض'},
    'galleryEmpty': {'en': 'No images yet', 'ar': 'لا توجد صور بعد'},
    'delete': {'en': 'Delete', 'ar': 'حذف'},
    'edit': {'en': 'Edit', 'ar': 'تحرير'},
    'noImage': {'en': 'Upload an image first', 'ar': 'قم برفع صورة أولاً'},
    'emptyInstruction': {'en': 'Please enter an instruction', 'ar': 'يرجى إدخال تعليمات'},
    'busy': {'en': 'Please wait for the current request', 'ar': 'يرجى انتظار الطلب الحالي'},
    'renderError': {'en': 'The image could not be displayed', 'ar': 'تعذر عرض الصورة'},
    'error': {'en': 'An error occurred', 'ar': 'حدث خطأ'},
    'success': {'en': 'Success', 'ar': 'تم بنجاح'},
}


def translate(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Look up a UI string.

    Falls back to English, then to the key itself, so a missing string never
    breaks the UI.

    Args:
        key: Translation key
        language: Language code ('en' or 'ar')

    Returns:
        The translated string
    """
    entry = TRANSLATIONS.get(key)
    if entry is None:
        logger.warning(f"Missing translation key: {key}")
        return key
    return entry.get(language) or entry[DEFAULT_LANGUAGE]


def is_rtl(language: str) -> bool:
    """Check whether a language is written right to left."""
    return language in RTL_LANGUAGES


def validate_language(language: str) -> str:
    """Return ``language`` if supported.

    Raises:
        ValueError: If the language is not supported
    """
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language '{language}', expected one of {', '.join(LANGUAGES)}")
    return language
