app_name = "persian_datetime"
app_title = "Persian DateTime"
app_publisher = "Exirsoft"
app_description = "Persian (Solar Hijri) month and date/time value types with Persian formatting and parsing."
app_email = "support@example.com"
app_license = "MIT"

# Boot
boot_session = "persian_datetime.boot.boot_session"

# Fixtures / Data
fixtures = []
