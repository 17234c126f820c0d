# agbtools

Command-line tools and a small library for turning assets into the binary
forms a handheld game build consumes, and back again. It needs nothing
outside the Python standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

Every command prints its error message to standard error and exits with
status 1 when it cannot do the conversion.

### gbagfx

Converts between tile graphics, PNG images, palettes, fonts and compressed
data. The conversion is chosen from the file extensions of the input and the
output; the first matching row of the table below wins.

```
gbagfx INPUT_PATH OUTPUT_PATH [options...]
```

| Input       | Output      | Options                                                     |
|-------------|-------------|-------------------------------------------------------------|
| `.1bpp` `.4bpp` `.8bpp` | `.png` | `-palette FILE`, `-object`, `-width N`, `-mwidth N`, `-mheight N` |
| `.png`      | `.1bpp` `.4bpp` `.8bpp` | `-num_tiles N`, `-mwidth N`, `-mheight N`       |
| `.png`      | `.gbapal`   |                                                             |
| `.gbapal`   | `.pal`      |                                                             |
| `.pal`      | `.gbapal`   | `-num_colors N`                                             |
| `.latfont` `.hwjpnfont` `.fwjpnfont` | `.png` |                                      |
| `.png`      | `.latfont` `.hwjpnfont` `.fwjpnfont` |                                   |
| any         | `.lz`       | `-overflow N`                                               |
| `.lz`       | any         |                                                             |
| any         | `.rl`       |                                                             |
| `.rl`       | any         |                                                             |

Notes on the options:

- `-palette FILE` colours the PNG with a `.gbapal` palette; without it the
  PNG is greyscale with inverted colours.
- `-object` marks palette index 0 as transparent in the PNG.
- `-width N` is the width of the image in tiles; `-mwidth` and `-mheight`
  give the metatile size in tiles.
- `-num_tiles N` limits how many tiles are written (default: all of them).
- `-num_colors N` truncates the palette, or pads it with black, to N colours.
- `-overflow N` appends N zero bytes before compressing but keeps the
  original size in the header, so the data overflows when decompressed.

Examples:

```
gbagfx title.png title.4bpp -num_tiles 40
gbagfx title.4bpp title.png -palette title.gbapal -width 8
gbagfx title.pal title.gbapal
gbagfx title.4bpp title.4bpp.lz
```

`.pal` files are Paint Shop Pro (JASC-PAL) palettes with CRLF line endings.

### aif2pcm

Converts 8-bit mono AIFF samples to the game's sample format (a 16-byte
header followed by the samples), optionally delta-compressed, and back.

```
aif2pcm sample.aif [sample.bin] [--compress]
aif2pcm sample.bin [sample.aif]
```

Without an output name, the input's extension is replaced with `.bin` or
`.aif`. `--compress` is only recognised after an explicit output name.
Samples turned back into AIFF get base note 60.

### bin2c

Prints a binary file as a C array definition on standard output.

```
bin2c INPUT_FILE VAR_NAME [-col N] [-pad N] [-size 1|2|4] [-signed] [-static] [-decimal]
```

Values are hexadecimal unless `-decimal` or `-signed` is given; `-col` sets
how many values go on a line and `-pad` the field width of each value.

## Library use

The conversions are also available as functions working on `bytes`:

```python
from agbtools.lz import lz_compress, lz_decompress
from agbtools.rl import rl_compress, rl_decompress

packed = lz_compress(b"hello hello hello")
assert lz_decompress(packed) == b"hello hello hello"
```

Other modules:

- `agbtools.gfx`: `Image`, `decode_tiles`, `encode_tiles`, `read_image`,
  `write_image`, `decode_gba_palette`, `encode_gba_palette`,
  `read_gba_palette`, `write_gba_palette`
- `agbtools.palette`: `Color`, `Palette`, `parse_jasc_palette`,
  `format_jasc_palette`, `read_jasc_palette`, `write_jasc_palette`
- `agbtools.font`: `decode_latin_font`, `encode_latin_font`,
  `read_latin_font`, `write_latin_font` and the half-width and full-width
  Japanese equivalents
- `agbtools.png`: `read_png`, `write_png`, `read_png_palette`
- `agbtools.aif2pcm`: `AifData`, `read_aif`, `build_pcm`, `build_aif`,
  `aif_to_pcm`, `pcm_to_aif`
- `agbtools.delta`: `delta_compress`, `delta_decompress`, `get_delta_index`
- `agbtools.extended`: `read_extended`, `write_extended` for 80-bit
  extended-precision floats
- `agbtools.bin2c`: `render_c_array`, `extract_data`
- `agbtools.util`: `parse_number`, `get_file_extension` and whole-file
  reading and writing helpers

Errors in input data are reported by raising `agbtools.util.ToolError`.

## Limitations

- The PNG reader handles only greyscale and indexed images without
  interlacing; the PNG writer produces only those two kinds.
- Tile graphics are 1, 4 or 8 bits per pixel; fonts are 2 bits per pixel.
- AIFF input must be mono with 8-bit samples.