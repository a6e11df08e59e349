from sensor.readings import DEFAULT_READING, SensorReading, normalize_payload


def test_normalize_accepts_dashboard_keys():
    n = normalize_payload({"rain": "200", "soil": 600, "waterDistanceCM": "50.5", "pressure": 1012.3})
    assert n.reading == SensorReading(200, 600, 50.5, 1012.3)
    assert n.usable
    assert n.errors == []
    assert n.warnings == []


def test_normalize_accepts_engine_keys():
    n = normalize_payload({"rain_raw": 350, "soil_raw": 1023, "water_distance_cm": 4.0, "pressure": 995})
    assert n.reading == SensorReading(350, 1023, 4.0, 995.0)
    assert n.usable


def test_missing_fields_fall_back_to_defaults():
    n = normalize_payload({})
    assert n.reading == DEFAULT_READING
    assert not n.usable
    assert set(n.errors) == {"missing_rain", "missing_soil", "missing_distance", "missing_pressure"}


def test_fault_sentinels_fall_back_to_previous():
    previous = SensorReading(400, 500, 12.0, 1001.0)
    n = normalize_payload(
        {"rain": -1, "soil": "-1", "waterDistanceCM": 9999, "pressure": -1},
        previous=previous,
    )
    assert n.reading == previous
    assert "rain_sensor_fault" in n.errors
    assert "soil_sensor_fault" in n.errors
    assert "distance_sensor_fault" in n.errors
    assert "pressure_sensor_fault" in n.errors


def test_unparsable_values_are_missing():
    n = normalize_payload({"rain": "abc", "soil": None, "waterDistanceCM": "nan", "pressure": ""})
    assert n.reading == DEFAULT_READING
    assert "missing_rain" in n.errors
    assert "missing_distance" in n.errors


def test_adc_values_are_clamped_with_warning():
    n = normalize_payload({"rain": 2000, "soil": -20, "waterDistanceCM": 30, "pressure": 1010})
    assert n.reading.rain_raw == 1023
    assert n.reading.soil_raw == 0
    assert "rain_clamped_high" in n.warnings
    assert "soil_clamped_low" in n.warnings
    assert n.usable


def test_negative_distance_is_invalid():
    n = normalize_payload({"rain": 1023, "soil": 1023, "waterDistanceCM": -3, "pressure": 1010})
    assert "invalid_distance" in n.errors
    assert n.reading.water_distance_cm == DEFAULT_READING.water_distance_cm


def test_as_args_order():
    assert SensorReading(1, 2, 3.0, 4.0).as_args() == (1, 2, 3.0, 4.0)
