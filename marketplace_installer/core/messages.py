"""Localized user-facing messages.

Messages are looked up by key and locale in an immutable catalog. Lookup
rules:

- the requested locale is used when the key has an entry for it;
- otherwise the default locale (English) is used;
- an unknown key is returned unchanged.

Format strings use positional ``{0}``-style placeholders.
"""

import contextlib
import locale as locale_module
import os
from collections.abc import Mapping
from types import MappingProxyType

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "tr")

_CATALOG: dict[str, dict[str, str]] = {
    "setting_up": {
        "en": "Initializing Spicetify Marketplace Installer...",
        "tr": "Spicetify Marketplace Yükleyicisi başlatılıyor...",
    },
    "cli_not_found": {
        "en": "Spicetify CLI not found. It appears Spicetify is not installed or not in PATH.",
        "tr": "Spicetify CLI bulunamadı. Spicetify yüklü değil veya PATH ortam değişkeninde "
        "tanımlı değil gibi görünüyor.",
    },
    "installing_cli": {
        "en": "Attempting to install Spicetify CLI...",
        "tr": "Spicetify CLI yüklenmeye çalışılıyor...",
    },
    "running_cli_installer": {
        "en": "Executing Spicetify CLI installer (this may take a moment, automatically "
        "answering 'No' to prompts)...",
        "tr": "Spicetify CLI yükleyicisi çalıştırılıyor (bu biraz zaman alabilir, istemlere "
        "otomatik olarak 'Hayır' yanıtı veriliyor)...",
    },
    "cli_install_script_finished": {
        "en": "Spicetify CLI installation script has finished executing.",
        "tr": "Spicetify CLI yükleme betiği çalıştırılması tamamlandı.",
    },
    "cli_install_script_failed": {
        "en": "Spicetify CLI installation script failed with exit code {0}.",
        "tr": "Spicetify CLI yükleme betiği {0} çıkış koduyla başarısız oldu.",
    },
    "cli_install_script_download_failed": {
        "en": "Failed to download Spicetify install script: {0}",
        "tr": "Spicetify yükleme betiği indirilemedi: {0}",
    },
    "cli_verified": {
        "en": "Spicetify CLI has been installed/verified successfully.",
        "tr": "Spicetify CLI başarıyla yüklendi/doğrulandı.",
    },
    "installation_failed": {
        "en": "Installation process failed.",
        "tr": "Yükleme işlemi başarısız oldu.",
    },
    "failed_to_get_user_data_path": {
        "en": "CRITICAL ERROR: Failed to determine Spicetify userdata path. Cannot proceed.",
        "tr": "KRİTİK HATA: Spicetify kullanıcı verileri yolu belirlenemedi. Devam edilemiyor.",
    },
    "user_data_path_fallback": {
        "en": "Warning: Spicetify path command did not yield a valid directory. "
        "Using fallback path: {0}",
        "tr": "Uyarı: Spicetify yol komutu geçerli bir dizin sağlamadı. "
        "Yedek yola geçiliyor: {0}",
    },
    "user_data_path": {
        "en": "Determined Spicetify UserData Path: {0}",
        "tr": "Belirlenen Spicetify Kullanıcı Veri Yolu: {0}",
    },
    "preparing_directories": {
        "en": "Preparing Marketplace directories (removing existing if present, "
        "then creating new)...",
        "tr": "Marketplace dizinleri hazırlanıyor (mevcutlar varsa kaldırılıyor, "
        "ardından yenileri oluşturuluyor)...",
    },
    "error_deleting_directory": {
        "en": "Error occurred while deleting directory '{0}': {1}",
        "tr": "'{0}' dizini silinirken hata oluştu: {1}",
    },
    "downloading_plugin": {
        "en": "Downloading latest Spicetify Marketplace release (marketplace.zip)...",
        "tr": "En son Spicetify Marketplace sürümü (marketplace.zip) indiriliyor...",
    },
    "extracting_plugin": {
        "en": "Extracting and installing Marketplace files...",
        "tr": "Marketplace dosyaları arşivden çıkarılıp yükleniyor...",
    },
    "detected_alternative_dir": {
        "en": "Detected extracted content in subdirectory: {0} (instead of expected {1})",
        "tr": "Çıkarılmış içerik alt dizinde bulundu: {0} (beklenen yerine {1})",
    },
    "files_extracted_directly": {
        "en": "Marketplace files appear to be extracted directly into the target application "
        "path. No subdirectory move needed.",
        "tr": "Marketplace dosyaları doğrudan hedef uygulama yoluna çıkarılmış gibi görünüyor. "
        "Alt dizinden taşıma gerekmiyor.",
    },
    "expected_dir_not_found": {
        "en": "Warning: Expected extracted content directory '{0}' was not found. Files might "
        "be in an unexpected location. If issues persist, consider manual extraction and "
        "placement into the CustomApps/marketplace directory.",
        "tr": "Uyarı: Beklenen çıkarılmış içerik dizini '{0}' bulunamadı. Dosyalar beklenmedik "
        "bir konumda olabilir. Sorun devam ederse, CustomApps/marketplace dizinine manuel "
        "çıkarma ve yerleştirmeyi düşünün.",
    },
    "moving_items": {
        "en": "Moving items from subdirectory '{0}' to Marketplace application root directory...",
        "tr": "Öğeler '{0}' alt dizininden Marketplace uygulama kök dizinine taşınıyor...",
    },
    "downloading_theme": {
        "en": "Downloading Marketplace placeholder theme (color.ini)...",
        "tr": "Marketplace yer tutucu teması (color.ini) indiriliyor...",
    },
    "local_theme_found": {
        "en": "An existing Spicetify theme ('{0}') was detected.",
        "tr": "Mevcut bir Spicetify teması ('{0}') algılandı.",
    },
    "replace_theme_prompt": {
        "en": "Do you want to replace it with the Marketplace placeholder theme? This is "
        "recommended to easily install themes from Marketplace.",
        "tr": "Bunu Marketplace yer tutucu temasıyla değiştirmek istiyor musunuz? "
        "Marketplace'ten kolayca tema yüklemek için bu önerilir.",
    },
    "configuring_cli": {
        "en": "Configuring Spicetify for Marketplace (as per official Spicetify guide)...",
        "tr": "Marketplace için Spicetify yapılandırılıyor (resmi Spicetify rehberine göre)...",
    },
    "setting_current_theme": {
        "en": "Setting current Spicetify theme to '{0}'...",
        "tr": "Geçerli Spicetify teması '{0}' olarak ayarlanıyor...",
    },
    "backing_up_and_applying": {
        "en": "Backing up current Spicetify configuration and applying all changes...",
        "tr": "Mevcut Spicetify yapılandırması yedekleniyor ve tüm değişiklikler uygulanıyor...",
    },
    "command_failed": {
        "en": "Spicetify command '{0}' failed with exit code {1}.",
        "tr": "Spicetify komutu '{0}', {1} çıkış koduyla başarısız oldu.",
    },
    "done": {
        "en": "Process completed!",
        "tr": "İşlem tamamlandı!",
    },
    "yes_char": {"en": "Y", "tr": "E"},
    "no_char": {"en": "N", "tr": "H"},
    "yes_full": {"en": "Yes", "tr": "Evet"},
    "no_full": {"en": "No", "tr": "Hayır"},
    "error_label": {"en": "ERROR:", "tr": "HATA:"},
    "verification_title": {
        "en": "Installation Attempt Finished - Verification Required",
        "tr": "Kurulum Denemesi Tamamlandı - Doğrulama Gerekiyor",
    },
    "verification_question": {
        "en": "Was the installation successful and is Marketplace visible in Spotify (after a "
        "full restart of Spotify)? (Enter 'N' for force reinstall if not)",
        "tr": "Kurulum başarılı oldu mu ve Marketplace Spotify'da (Spotify'ı tam yeniden "
        "başlattıktan sonra) görünüyor mu? (Başarısız olduysa, zorla yeniden kurulum için "
        "'H' girin)",
    },
    "great_success": {
        "en": "Excellent! Marketplace should now be available. Exiting installer.",
        "tr": "Harika! Marketplace şimdi kullanılabilir olmalı. Yükleyici sonlandırılıyor.",
    },
    "proceeding_with_force_reinstall": {
        "en": "Understood. Proceeding with a force reinstall to attempt to resolve potential "
        "issues.",
        "tr": "Anlaşıldı. Olası sorunları çözmek amacıyla zorla yeniden kurulum ile devam "
        "ediliyor.",
    },
    "force_reinstall_starting": {
        "en": "Starting force reinstall process for Spicetify Marketplace...",
        "tr": "Spicetify Marketplace için zorla yeniden kurulum işlemi başlatılıyor...",
    },
    "cleaning_cli_data": {
        "en": "Attempting to clean existing Spicetify data (this includes running "
        "'spicetify restore' and deleting data directories)...",
        "tr": "Mevcut Spicetify verileri temizlenmeye çalışılıyor ('spicetify restore' "
        "çalıştırılacak ve veri dizinleri silinecektir)...",
    },
    "running_restore": {
        "en": "Attempting to run 'spicetify restore'...",
        "tr": "'spicetify restore' çalıştırılmaya çalışılıyor...",
    },
    "deleting_directory": {
        "en": "Deleting directory: {0}",
        "tr": "Dizin siliniyor: {0}",
    },
    "cli_data_cleaned": {
        "en": "Spicetify data directories have been cleaned.",
        "tr": "Spicetify veri dizinleri temizlendi.",
    },
    "data_cleaned_fresh_install": {
        "en": "Spicetify data cleaned. Now attempting a fresh installation of Spicetify "
        "Marketplace...",
        "tr": "Spicetify verileri temizlendi. Şimdi Spicetify Marketplace için yeni bir "
        "kurulum deneniyor...",
    },
    "admin_rights_detected": {
        "en": "Administrator rights detected or --bypass-admin flag used. The '--bypass-admin' "
        "flag will be automatically used for Spicetify commands.",
        "tr": "Yönetici hakları algılandı veya --bypass-admin bayrağı kullanıldı. Spicetify "
        "komutları için '--bypass-admin' bayrağı otomatik olarak kullanılacak.",
    },
    "during_force_reinstall": {
        "en": "An error occurred during the force reinstall process: {0}",
        "tr": "Zorla yeniden kurulum işlemi sırasında bir hata oluştu: {0}",
    },
    "during_standard_install": {
        "en": "An error occurred during the standard install process: {0}",
        "tr": "Standart kurulum işlemi sırasında bir hata oluştu: {0}",
    },
    "check_errors": {
        "en": "If Spotify's appearance hasn't changed, please review the messages above for "
        "any errors. Also, check '{0}' for detailed logs.",
        "tr": "Eğer Spotify görünümünde bir değişiklik olmadıysa, lütfen yukarıdaki mesajları "
        "olası hatalar için gözden geçirin. Ayrıca, detaylı kayıtlar için '{0}' dosyasını "
        "kontrol edin.",
    },
    "restart_spotify": {
        "en": "IMPORTANT: Please restart Spotify completely (quit from system tray if running, "
        "then reopen) for all changes to take full effect.",
        "tr": "ÖNEMLİ: Tüm değişikliklerin tam olarak etkili olması için lütfen Spotify'ı "
        "tamamen yeniden başlatın (çalışıyorsa sistem tepsisinden çıkın, sonra tekrar açın).",
    },
    "press_any_key": {
        "en": "Press any key to exit this installer.",
        "tr": "Bu yükleyiciden çıkmak için herhangi bir tuşa basın.",
    },
}

MESSAGES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {key: MappingProxyType(entry) for key, entry in _CATALOG.items()}
)


def translate(key: str, locale: str, *args: object) -> str:
    """Look up and format a message.

    Args:
        key: Message key
        locale: Two-letter language code
        *args: Positional format arguments

    Returns:
        The formatted message, the default-locale message if ``locale`` has no
        entry, or ``key`` itself if the key is unknown
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return key

    template = entry.get(locale) or entry.get(DEFAULT_LOCALE)
    if template is None:
        return key

    if not args:
        return template

    try:
        return template.format(*args)
    except (IndexError, KeyError, ValueError):
        return f"{template} (FORMATTING ERROR: got {len(args)} args)"


def detect_locale() -> str:
    """Detect the user's message language.

    Returns:
        "tr" for a Turkish user locale, otherwise the default locale
    """
    candidates = [
        os.environ.get("LC_ALL"),
        os.environ.get("LC_MESSAGES"),
        os.environ.get("LANG"),
    ]
    with contextlib.suppress(ValueError):
        candidates.append(locale_module.getlocale()[0])

    for value in candidates:
        if value:
            return "tr" if value.lower().startswith(("tr", "turkish")) else DEFAULT_LOCALE
    return DEFAULT_LOCALE


class Messages:
    """Message lookup bound to one locale."""

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self.locale = locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE

    def __call__(self, key: str, *args: object) -> str:
        return translate(key, self.locale, *args)
