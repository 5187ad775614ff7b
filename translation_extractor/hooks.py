# FILE: translation_extractor/hooks.py
app_name = "translation_extractor"
app_title = "Translation Extractor"
app_publisher = "Translation Extractor Authors"
app_description = "Extracts t() keys from JS/TS sources and syncs JSON translation files"
app_email = ""

app_license = "mit"


# Full sync after `bench migrate`, using the site_config.json "translation_extractor" section
after_migrate = "translation_extractor.api.translations.after_migrate"
