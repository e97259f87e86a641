"""Sandbox policies, seccomp and Landlock rules, memory limits and Seatbelt profiles."""