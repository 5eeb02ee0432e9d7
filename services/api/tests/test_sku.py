from app.services.dimensions import DeviceType
from app.services.sku import compute_sku_key


def test_phone_sku_key():
    key = compute_sku_key(
        DeviceType.PHONE,
        {"model": "iPhone 13", "condition": "New", "storage": 128, "color": "Blue", "battery": "100%"},
    )
    assert key == "phone-iphone-13-new-128-blue-100"


def test_laptop_sku_key_includes_cpu_and_ram():
    key = compute_sku_key(
        DeviceType.LAPTOP,
        {
            "model": "MacBook Air M2",
            "condition": "Used",
            "storage": 512,
            "color": "Midnight",
            "battery": 90,
            "cpu": "M2",
            "ram": 8,
        },
    )
    assert key == "laptop-macbook-air-m2-used-512-midnight-90-m2-8"


def test_sku_key_ignores_dimensions_of_other_device_types():
    attrs = {"model": "iPhone 13", "condition": "New", "storage": "256", "color": "Red", "battery": "95", "cpu": "A15"}
    assert "a15" not in compute_sku_key(DeviceType.PHONE, attrs)
    # Storage normalizes: "256" and 256.0 give the same key
    assert compute_sku_key(DeviceType.PHONE, attrs) == compute_sku_key(DeviceType.PHONE, {**attrs, "storage": 256.0})
