import pytest

from edgekit.settings import board_settings


def test_node_mcu_board():
    board = board_settings("node_mcu")
    assert board.button_pin == 0
    assert board.button_active_low is True
    assert board.led_pin == 2
    assert board.led_inverse is True
    assert board.led_is_rgb is False


def test_wemos_shares_node_mcu_configuration():
    assert board_settings("wemos_d1_mini") == board_settings("node_mcu")


def test_sparkfun_uses_addressable_led():
    board = board_settings("sparkfun_blynk_board")
    assert board.led_pin_ws2812 == 4
    assert board.led_brightness == 64
    assert board.led_is_rgb is True


def test_witty_cloud_rgb_pins():
    board = board_settings("Witty-Cloud-Board")
    assert (board.led_pin_r, board.led_pin_g, board.led_pin_b) == (15, 12, 13)
    assert board.button_pin == 4
    assert board.led_is_rgb is True


def test_wio_terminal_pins():
    board = board_settings("wio_terminal")
    assert board.button_pin == "WIO_KEY_A"
    assert board.led_pin == "LED_BUILTIN"
    assert board.led_brightness == 255


def test_advanced_defaults():
    board = board_settings()
    assert board.default_server == "blynk.cloud"
    assert board.default_port == 443
    assert board.ap_url == "blynk.setup"
    assert board.button_hold_time_action == 10000
    assert board.cloud_max_retries == 500


def test_unknown_board():
    with pytest.raises(KeyError):
        board_settings("toaster")