import pytest

from chipeight.language import Register
from chipeight.machine import Chip8, ExecutionError, Screen


def load(*words):
    chip = Chip8()
    for offset, word in enumerate(words):
        start = Chip8.CODE_START + 2 * offset
        chip.memory[start : start + 2] = word.to_bytes(2, "big")
    return chip


def test_new_chip_defaults():
    chip = Chip8()
    assert chip.pc == 0x200
    assert len(chip.memory) == 4096
    assert chip.sp == 0
    assert chip.registers == [0] * 16


def test_draw_bit_xor_and_collision():
    screen = Screen()
    assert screen.draw_bit(3, 5, True) is False
    assert screen.rows[3][5] is True
    assert screen.draw_bit(3, 5, True) is True
    assert screen.rows[3][5] is False
    assert screen.draw_bit(3, 5, False) is False


def test_draw_bit_wraps_coordinates():
    screen = Screen()
    screen.draw_bit(Screen.NROWS, Screen.NCOLS, True)
    assert screen.rows[0][0] is True


def test_screen_str_blank():
    lines = str(Screen()).splitlines()
    assert lines == ["." * Screen.NCOLS] * Screen.NROWS


def test_screen_print_lit_pixel(capsys):
    screen = Screen()
    screen.draw_bit(0, 0, True)
    screen.print()
    out = capsys.readouterr().out
    assert out.startswith("█.")
    assert out == str(screen)


def test_set_register():
    chip = load(0x6A2B)
    chip.run_instr()
    assert chip.rv(Register.VA) == 0x2B
    assert chip.pc == Chip8.CODE_START + 2


def test_goto():
    chip = load(0x1234)
    chip.run_instr()
    assert chip.pc == 0x234


def test_call_and_return():
    chip = load(0x2300)
    chip.memory[0x300:0x302] = b"\x00\xee"
    chip.run_instr()
    assert chip.pc == 0x300
    assert chip.sp == 1
    assert chip.stack[0] == Chip8.CODE_START
    chip.run_instr()
    assert chip.pc == Chip8.CODE_START + 2
    assert chip.sp == 0


@pytest.mark.parametrize(
    "word, skipped",
    [(0x3105, True), (0x3106, False), (0x4105, False), (0x4106, True)],
)
def test_skip_on_constant(word, skipped):
    chip = load(word)
    chip.registers[Register.V1] = 5
    chip.run_instr()
    assert chip.pc == Chip8.CODE_START + (4 if skipped else 2)


def test_add_sets_carry():
    chip = load(0x8014)
    chip.registers[Register.V0] = 0xFFFF
    chip.registers[Register.V1] = 1
    chip.run_instr()
    assert chip.rv(Register.V0) == 0
    assert chip.rv(Register.VF) == 1


def test_sub_without_and_with_borrow():
    chip = load(0x8015, 0x8015)
    chip.registers[Register.V0] = 5
    chip.registers[Register.V1] = 3
    chip.run_instr()
    assert chip.rv(Register.V0) == 2
    assert chip.rv(Register.VF) == 1
    chip.registers[Register.V0] = 3
    chip.registers[Register.V1] = 5
    chip.run_instr()
    assert chip.rv(Register.V0) == 0xFFFE
    assert chip.rv(Register.VF) == 0


def test_shift_right_clears_vf():
    chip = load(0x8206)
    chip.registers[Register.V2] = 0b101
    chip.registers[Register.VF] = 1
    chip.run_instr()
    assert chip.rv(Register.V2) == 0b10
    assert chip.rv(Register.VF) == 0


def test_clear_screen():
    chip = load(0x00E0)
    chip.screen.draw_bit(1, 1, True)
    chip.run_instr()
    assert chip.screen == Screen()


def test_draw_sprite_and_collision():
    chip = load(0xA300, 0xD011)
    chip.memory[0x300] = 0xFF
    chip.run_instr()
    chip.run_instr()
    assert chip.screen.rows[0][:8] == [True] * 8
    assert chip.screen.rows[0][8] is False
    assert chip.rv(Register.VF) == 0
    chip.pc = Chip8.CODE_START + 2
    chip.run_instr()
    assert chip.screen == Screen()
    assert chip.rv(Register.VF) == 1


def test_data_cannot_execute():
    chip = load(0xFFFF)
    with pytest.raises(ExecutionError, match="Data cannot be executed"):
        chip.run_instr()


def test_unimplemented_instruction_raises():
    chip = load(0xF007)
    with pytest.raises(ExecutionError):
        chip.run_instr()


def test_stack_underflow_and_overflow():
    chip = Chip8()
    with pytest.raises(ExecutionError):
        chip.pop_stack()
    for value in range(Chip8.STACK_SIZE):
        chip.push_stack(value)
    with pytest.raises(ExecutionError):
        chip.push_stack(99)
    assert chip.pop_stack() == Chip8.STACK_SIZE - 1


def test_read_past_memory_end():
    chip = Chip8()
    chip.pc = Chip8.MEM_SIZE - 1
    with pytest.raises(ExecutionError):
        chip.read_instr()


def test_load_memory_round_trip(tmp_path):
    program = bytes([0x60, 0x01, 0x12, 0x00])
    path = tmp_path / "prog.ch8"
    path.write_bytes(program)
    chip = Chip8()
    chip.load_memory(path)
    assert bytes(chip.memory[Chip8.CODE_START : Chip8.CODE_START + 4]) == program
    assert chip.memory[Chip8.CODE_START + 4] == 0


def test_load_memory_too_large(tmp_path):
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(Chip8.MEM_SIZE - Chip8.CODE_START))
    with pytest.raises(ValueError, match="exceeds"):
        Chip8().load_memory(path)


def test_copy_is_independent():
    chip = Chip8()
    clone = chip.copy()
    clone.registers[0] = 7
    clone.memory[0] = 1
    clone.screen.draw_bit(0, 0, True)
    assert chip.registers[0] == 0
    assert chip.memory[0] == 0
    assert chip.screen == Screen()


def test_rand_with_zero_mask():
    chip = load(0xC300)
    chip.registers[Register.V3] = 9
    chip.run_instr()
    assert chip.rv(Register.V3) == 0


def test_incr_i():
    chip = load(0xF41E)
    chip.i = 0x10
    chip.registers[Register.V4] = 5
    chip.run_instr()
    assert chip.i == 0x15


def test_jump_adds_v0():
    chip = load(0xB300)
    chip.registers[Register.V0] = 2
    chip.run_instr()
    assert chip.pc == 0x302