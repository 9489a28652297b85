"""Literal reply lines for each dialogue intent, in Indonesian."""

from datetime import date, time
from typing import Optional

from reservation_bot.config import settings
from reservation_bot.schemas.session_schema import CollectedFields

_resto = settings.restaurant

DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
MONTH_NAMES = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def format_date(value: date) -> str:
    """``date(2026, 3, 15)`` -> ``"Minggu, 15 Maret 2026"``."""
    return f"{DAY_NAMES[value.weekday()]}, {value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def format_time(value: time) -> str:
    return f"{value.hour:02d}.{value.minute:02d}"


def _hours() -> str:
    return f"{_resto.opening_hour:02d}.00 - {_resto.closing_hour:02d}.00 WIB"


def welcome_line() -> str:
    return (
        f"Selamat datang di {_resto.name}! 👋\n"
        "Saya siap membantu Anda membuat reservasi meja.\n\n"
        "Untuk memulai, kapan Anda ingin melakukan reservasi? "
        "Silakan sebutkan tanggal dan harinya."
    )


def ask_date_line() -> str:
    return "Kapan Anda ingin melakukan reservasi? Silakan sebutkan tanggal dan harinya."


def ask_time_line(reservation_date: date) -> str:
    return (
        f"Baik, tanggal {format_date(reservation_date)}. "
        f"Jam berapa Anda ingin datang? Kami buka pukul {_hours()}."
    )


def ask_guests_line(reservation_time: time) -> str:
    return (
        f"Pukul {format_time(reservation_time)}, dicatat. "
        "Untuk berapa orang reservasinya?"
    )


def ask_name_line(guest_count: int) -> str:
    return f"Meja untuk {guest_count} orang. Atas nama siapa reservasinya?"


def ask_contact_line(customer_name: str) -> str:
    return (
        f"Terima kasih, {customer_name}. "
        "Nomor telepon berapa yang bisa kami hubungi?"
    )


def invalid_date_line() -> str:
    return (
        "Maaf, tanggal tersebut belum bisa saya terima. "
        "Pastikan tanggalnya setelah hari ini, misalnya \"Sabtu, 15 Maret 2026\" atau \"15/03/2026\"."
    )


def invalid_time_line() -> str:
    return (
        f"Maaf, jam tersebut di luar jam operasional kami ({_hours()}). "
        "Silakan pilih jam lain, misalnya \"19.00\"."
    )


def invalid_guests_line() -> str:
    return (
        f"Maaf, jumlah tamu harus berupa angka antara {_resto.min_guests} "
        f"dan {_resto.max_guests} orang. Untuk berapa orang reservasinya?"
    )


def invalid_phone_line() -> str:
    return (
        "Maaf, nomor telepon tersebut tidak valid. "
        "Gunakan format 08xx atau 62xx, misalnya 081234567890."
    )


def build_summary(collected: CollectedFields) -> str:
    """Read-back of every collected field, ending with the confirmation question."""
    lines = ["Berikut ringkasan reservasi Anda:"]
    if collected.reservation_date is not None:
        lines.append(f"📅 Tanggal: {format_date(collected.reservation_date)}")
    if collected.reservation_time is not None:
        lines.append(f"🕐 Jam: {format_time(collected.reservation_time)} WIB")
    if collected.guest_count is not None:
        lines.append(f"👥 Jumlah orang: {collected.guest_count}")
    if collected.customer_name is not None:
        lines.append(f"👤 Nama: {collected.customer_name}")
    if collected.phone is not None:
        lines.append(f"📞 Kontak: {collected.phone}")
    lines.append("\nApakah data di atas sudah benar? Balas \"ya\" untuk konfirmasi atau \"tidak\" untuk mengulang.")
    return "\n".join(lines)


def restart_line() -> str:
    return (
        "Baik, data sebelumnya sudah saya hapus dan kita mulai lagi dari awal. "
        + ask_date_line()
    )


def confirmed_line(customer_name: Optional[str] = None) -> str:
    who = f", {customer_name}" if customer_name else ""
    return f"Reservasi Anda sudah kami konfirmasi{who}. Kami tunggu kedatangan Anda!"


def reservation_code_suffix(code: str) -> str:
    return (
        f"\n\n✅ Kode Reservasi Anda: {code}\n\n"
        "Simpan kode ini sebagai bukti reservasi. Terima kasih!"
    )


def already_complete_line(code: Optional[str]) -> str:
    if code:
        return f"Reservasi Anda sudah tercatat dengan kode {code}. Terima kasih!"
    return "Reservasi Anda sudah tercatat. Terima kasih!"


def save_failed_line() -> str:
    return (
        "Maaf, terjadi gangguan sehingga reservasi Anda BELUM tersimpan. "
        "Data Anda masih ada; balas \"ya\" sekali lagi untuk mencoba menyimpan."
    )


def build_rephrase_request(line: str) -> str:
    """User-turn content asking the model to restyle a fixed line."""
    return f"Tulis ulang balasan berikut untuk pelanggan:\n\n{line}"
