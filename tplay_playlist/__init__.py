"""Clear-key M3U playlist and DASH manifest generator."""
